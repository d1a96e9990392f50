# visitrack/config/settings/testing.py
from visitrack.config.settings.base import BackendBaseSettings
from visitrack.config.settings.environment import Environment

class BackendTestSettings(BackendBaseSettings):
    """Test-run settings"""
    DESCRIPTION: str | None = "Test Environment - VisiTrack API"
    DEBUG: bool = False
    ENVIRONMENT: Environment = Environment.TESTING
    
    LOG_LEVEL: str = "WARNING"
    LOG_TO_FILE: bool = False
    BCRYPT_ROUNDS: int = 4
