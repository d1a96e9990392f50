# visitrack/config/__init__.py
from .setting import settings, validate_settings, missing_settings
from .database import db_connection, get_database

__all__ = [
    "settings",
    "validate_settings",
    "missing_settings",
    "db_connection",
    "get_database"
]
