# visitrack/models/database.py
from pydantic import BaseModel
from typing import Optional


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = "healthy"
    service: str = "visitrack-api"
    timestamp: Optional[str] = None
    database_connected: bool = True
