# visitrack/config/settings/staging.py
from visitrack.config.settings.base import BackendBaseSettings
from visitrack.config.settings.environment import Environment

class BackendStageSettings(BackendBaseSettings):
    """Staging-specific settings"""
    DESCRIPTION: str | None = "Staging Environment - VisiTrack API"
    DEBUG: bool = True
    ENVIRONMENT: Environment = Environment.STAGING
