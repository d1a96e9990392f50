# visitrack/config/settings/production.py
from visitrack.config.settings.base import BackendBaseSettings
from visitrack.config.settings.environment import Environment

class BackendProdSettings(BackendBaseSettings):
    """Production-specific settings"""
    DESCRIPTION: str | None = "Production Environment - VisiTrack API"
    DEBUG: bool = False
    ENVIRONMENT: Environment = Environment.PRODUCTION
    
    LOG_LEVEL: str = "WARNING"
    
    # CORS_ORIGINS is loaded from .env in production
