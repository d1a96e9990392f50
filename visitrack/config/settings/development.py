# visitrack/config/settings/development.py
from visitrack.config.settings.base import BackendBaseSettings
from visitrack.config.settings.environment import Environment

class BackendDevSettings(BackendBaseSettings):
    """Development-specific settings"""
    DESCRIPTION: str | None = "Development Environment - VisiTrack API"
    DEBUG: bool = True
    ENVIRONMENT: Environment = Environment.DEVELOPMENT
    
    LOG_LEVEL: str = "DEBUG"
    
    # More permissive CORS for local development
    CORS_ORIGINS: list = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
