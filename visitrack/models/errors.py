# visitrack/models/errors.py
from pydantic import BaseModel
from typing import Any


class ErrorResponse(BaseModel):
    """Standard error response"""
    detail: Any


class ImportErrorDetail(BaseModel):
    """Counts reported with a rejected spreadsheet import"""
    message: str
    imported: int = 0
    total: int = 0
    skipped: int = 0


class ImportErrorResponse(BaseModel):
    detail: ImportErrorDetail
