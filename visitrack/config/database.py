# visitrack/config/database.py
from typing import Callable, Optional

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError
from loguru import logger

from .setting import settings
from .settings.base import BackendBaseSettings


class DatabaseUnavailableError(RuntimeError):
    """Raised when no MongoDB connection can be established"""


class DatabaseConnection:
    """MongoDB connection manager

    Holds one reused client. The client is opened at startup, pinged
    on every checkout and reopened when the ping fails.
    """

    def __init__(
        self,
        config: BackendBaseSettings,
        client_factory: Callable[..., MongoClient] = MongoClient,
    ):
        self._config = config
        self._client_factory = client_factory
        self._client: Optional[MongoClient] = None
        self._db: Optional[Database] = None

    def connect(self) -> bool:
        """Establish database connection"""
        if not self._config.MONGODB_URI or not self._config.DATABASE_NAME:
            logger.error("MongoDB is not configured (MONGODB_URI / MONGODB_DB missing)")
            return False

        try:
            self._client = self._client_factory(
                self._config.MONGODB_URI,
                serverSelectionTimeoutMS=self._config.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
                connectTimeoutMS=self._config.MONGODB_CONNECT_TIMEOUT_MS,
                socketTimeoutMS=self._config.MONGODB_SOCKET_TIMEOUT_MS,
                maxPoolSize=self._config.MONGODB_MAX_POOL_SIZE,
                minPoolSize=self._config.MONGODB_MIN_POOL_SIZE,
                retryWrites=True,
                retryReads=True,
            )

            self._client.admin.command('ping')
            self._db = self._client[self._config.DATABASE_NAME]

            logger.info(f"Connected to MongoDB: {self._config.DATABASE_NAME}")
            return True

        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
        except Exception as e:
            logger.error(f"Unexpected database error: {e}")

        self._reset()
        return False

    def disconnect(self):
        """Close database connection"""
        if self._client is not None:
            self._client.close()
            logger.info("Disconnected from MongoDB")
        self._reset()

    def _reset(self):
        self._client = None
        self._db = None

    def _checkout(self):
        if self._client is not None and not self.health_check():
            logger.warning("Cached MongoDB connection failed health check, reconnecting")
            self.disconnect()

        if self._client is None and not self.connect():
            raise DatabaseUnavailableError("Database connection failed")

    def get_client(self) -> MongoClient:
        """Get MongoDB client"""
        self._checkout()
        return self._client

    def get_database(self) -> Database:
        """Get database instance"""
        self._checkout()
        return self._db

    def health_check(self) -> bool:
        """Check database health"""
        try:
            if self._client is None:
                return False
            self._client.admin.command('ping')
            return True
        except PyMongoError:
            return False


# Global connection
db_connection = DatabaseConnection(settings)

def get_database() -> Database:
    """Dependency to get database instance"""
    return db_connection.get_database()
