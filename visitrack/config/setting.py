# visitrack/config/setting.py
"""
Settings manager - picks the environment-specific settings class
"""
from decouple import config
from visitrack.config.settings.base import BackendBaseSettings
from visitrack.config.settings.development import BackendDevSettings
from visitrack.config.settings.staging import BackendStageSettings
from visitrack.config.settings.production import BackendProdSettings
from visitrack.config.settings.testing import BackendTestSettings

# Determine environment from .env file
ENV = config("ENVIRONMENT", default="DEV")

def get_settings(env: str = None) -> BackendBaseSettings:
    """
    Factory function to return appropriate settings based on environment
    """
    env_map = {
        "DEV": BackendDevSettings,
        "DEVELOPMENT": BackendDevSettings,
        "STAGE": BackendStageSettings,
        "STAGING": BackendStageSettings,
        "PROD": BackendProdSettings,
        "PRODUCTION": BackendProdSettings,
        "TEST": BackendTestSettings,
        "TESTING": BackendTestSettings,
    }
    
    settings_class = env_map.get((env or ENV).upper(), BackendDevSettings)
    return settings_class()


# Global settings instance
settings = get_settings()


def missing_settings(current: BackendBaseSettings = None) -> list[str]:
    """Names of required settings that are empty"""
    current = current or settings
    required = {
        "MONGODB_URI": current.MONGODB_URI,
        "MONGODB_DB": current.DATABASE_NAME,
        "JWT_SECRET_KEY": current.JWT_SECRET_KEY,
    }
    return [name for name, value in required.items() if not value]


def validate_settings(current: BackendBaseSettings = None):
    """Validate critical settings on startup"""
    errors = [f"{name} must be set" for name in missing_settings(current)]
    
    if errors:
        raise ValueError(f"Configuration errors: {', '.join(errors)}")
    
    return True
