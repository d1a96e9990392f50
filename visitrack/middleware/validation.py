# visitrack/middleware/validation.py
from fastapi import HTTPException
from typing import Optional
import re
from bson import ObjectId
from loguru import logger


EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
MIN_PASSWORD_LENGTH = 6


class ValidationMiddleware:
    """Request validation helpers shared by the services"""

    @staticmethod
    def is_valid_email(email: Optional[str]) -> bool:
        return bool(email) and bool(EMAIL_PATTERN.match(email))

    @staticmethod
    def validate_email(email: Optional[str]) -> str:
        """Validate email format and return the normalized address"""
        if not email or not email.strip():
            raise HTTPException(400, "Email is required")

        if not ValidationMiddleware.is_valid_email(email.strip()):
            raise HTTPException(400, "Invalid email format")

        return email.strip().lower()

    @staticmethod
    def validate_object_id(value: Optional[str], label: str = "ID") -> ObjectId:
        """Validate a 24-hex ObjectId string"""
        cleaned = str(value).strip() if value is not None else ""
        if not cleaned or not ObjectId.is_valid(cleaned):
            logger.debug(f"Rejected {label} value: {cleaned!r}")
            raise HTTPException(400, f"Invalid {label} format")
        return ObjectId(cleaned)

    @staticmethod
    def validate_password(password: Optional[str]) -> bool:
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise HTTPException(
                400,
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        return True

    @staticmethod
    def require_fields(payload: dict, fields: list, message: str) -> bool:
        """Reject when any of the named fields is missing or blank"""
        for field in fields:
            value = payload.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise HTTPException(400, message)
        return True
