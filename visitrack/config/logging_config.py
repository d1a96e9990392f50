# visitrack/config/logging_config.py
"""
Logging configuration for the VisiTrack API
"""

import sys
from pathlib import Path
from loguru import logger

from .settings.environment import Environment


# Retention per environment (days for the application log)
RETENTION_DAYS = {
    Environment.DEVELOPMENT: 7,
    Environment.STAGING: 14,
    Environment.PRODUCTION: 30,
    Environment.TESTING: 1,
}


def setup_logging(config):
    """
    Configure loguru for console and (optionally) file logging

    Args:
        config: settings instance (LOG_LEVEL, LOG_TO_FILE, LOG_DIR, ENVIRONMENT)
    """
    # Remove default handler
    logger.remove()

    # Console handler with color formatting
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=config.LOG_LEVEL.upper()
    )

    if not config.LOG_TO_FILE:
        return logger

    log_dir = Path(config.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    environment = getattr(config, "ENVIRONMENT", Environment.DEVELOPMENT)
    retention_days = RETENTION_DAYS.get(environment, 7)

    # Application log - daily rotation
    logger.add(
        str(log_dir / "visitrack_{time:YYYY-MM-DD}.log"),
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
        rotation="1 day",
        retention=f"{retention_days} days",
        level="DEBUG",
        compression="zip"
    )

    # Error-specific log file
    logger.add(
        str(log_dir / "errors_{time:YYYY-MM-DD}.log"),
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
        level="ERROR",
        rotation="1 day",
        retention="60 days",  # Keep errors longer
        compression="zip"
    )

    # Tenant audit trail (records bound with an owner_id)
    logger.add(
        str(log_dir / "tenant_audit_{time:YYYY-MM-DD}.log"),
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {extra[owner_id]} | {message}",
        filter=lambda record: "owner_id" in record["extra"],
        rotation="1 day",
        retention="30 days",
        level="INFO"
    )

    logger.info(f"Logging system initialized ({environment})")
    return logger


def log_tenant_action(owner_id: str, action: str, **details):
    """Log a tenant-scoped write for auditing"""
    summary = " | ".join(f"{key}: {value}" for key, value in details.items())
    logger.bind(owner_id=owner_id).info(f"TENANT_ACTION | {action} | {summary}")


def log_auth_event(event: str, email: str, success: bool):
    """Log login attempts without credentials"""
    status = "success" if success else "failure"
    logger.info(f"AUTH | {event} | {email} | {status}")
