# visitrack/config/settings/base.py
import pathlib
from decouple import config
from pydantic_settings import BaseSettings
from typing import Optional

ROOT_DIR: pathlib.Path = pathlib.Path(__file__).parent.parent.parent.parent.resolve()

class BackendBaseSettings(BaseSettings):
    """
    Base settings - single source of truth, overridden per environment
    """
    
    # Application Metadata
    TITLE: str = "VisiTrack API"
    VERSION: str = "1.0.0"
    DESCRIPTION: Optional[str] = "Multi-tenant event visitor management"
    DEBUG: bool = config("DEBUG", default=False, cast=bool)
    
    # Server Configuration
    SERVER_HOST: str = config("API_HOST", default="0.0.0.0", cast=str)
    SERVER_PORT: int = config("API_PORT", default=8000, cast=int)
    API_PREFIX: str = "/api"
    DOCS_URL: str = "/docs"
    OPENAPI_URL: str = "/openapi.json"
    REDOC_URL: str = "/redoc"
    
    # MongoDB Configuration
    MONGODB_URI: str = config("MONGODB_URI", default="")
    DATABASE_NAME: str = config("MONGODB_DB", default="")
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = config("MONGODB_SERVER_SELECTION_TIMEOUT_MS", default=10000, cast=int)
    MONGODB_CONNECT_TIMEOUT_MS: int = config("MONGODB_CONNECT_TIMEOUT_MS", default=10000, cast=int)
    MONGODB_SOCKET_TIMEOUT_MS: int = config("MONGODB_SOCKET_TIMEOUT_MS", default=45000, cast=int)
    MONGODB_MAX_POOL_SIZE: int = config("MONGODB_MAX_POOL_SIZE", default=10, cast=int)
    MONGODB_MIN_POOL_SIZE: int = config("MONGODB_MIN_POOL_SIZE", default=1, cast=int)
    
    # JWT Configuration
    JWT_SECRET_KEY: str = config("JWT_SECRET_KEY", default="")
    JWT_ALGORITHM: str = config("JWT_ALGORITHM", default="HS256")
    JWT_EXPIRE_MINUTES: int = config("JWT_EXPIRE_MINUTES", default=7 * 24 * 60, cast=int)
    BCRYPT_ROUNDS: int = config("BCRYPT_ROUNDS", default=12, cast=int)
    
    # CORS Configuration
    CORS_ORIGINS: list = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list = ["*"]
    CORS_ALLOW_HEADERS: list = ["*"]
    
    # Logging Configuration
    LOG_LEVEL: str = config("LOG_LEVEL", default="INFO")
    LOG_TO_FILE: bool = config("LOG_TO_FILE", default=True, cast=bool)
    LOG_DIR: str = config("LOG_DIR", default="logs")
    
    # Pagination
    DEFAULT_PAGE_SIZE: int = config("DEFAULT_PAGE_SIZE", default=20, cast=int)
    DATASET_PAGE_SIZE: int = config("DATASET_PAGE_SIZE", default=50, cast=int)
    MAX_PAGE_SIZE: int = config("MAX_PAGE_SIZE", default=200, cast=int)
    
    # Uploads
    MAX_UPLOAD_SIZE_BYTES: int = config("MAX_UPLOAD_SIZE_BYTES", default=100 * 1024 * 1024, cast=int)
    UPLOAD_TMP_DIR: Optional[str] = config("UPLOAD_TMP_DIR", default=None)
    
    # API Configuration
    API_TITLE: str = TITLE
    API_DESCRIPTION: str = DESCRIPTION or "Multi-tenant event visitor management"
    API_VERSION: str = VERSION
    API_HOST: str = SERVER_HOST
    API_PORT: int = SERVER_PORT
    
    class Config:
        case_sensitive: bool = True
        env_file: str = f"{str(ROOT_DIR)}/.env"
        env_file_encoding: str = "utf-8"
        validate_assignment: bool = True
        extra: str = "ignore"
    
