# visitrack/api/errors.py
from fastapi import HTTPException
from loguru import logger

from ..config.setting import settings


def server_error(message: str, error: Exception) -> HTTPException:
    """500 with a generic message; the cause is only exposed in debug mode"""
    logger.opt(exception=error).error(f"{message}: {error}")
    detail = f"{message}: {error}" if settings.DEBUG else message
    return HTTPException(500, detail)
