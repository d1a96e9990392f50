# visitrack/api/routes/health.py
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from typing import Dict, Any
from loguru import logger

from ...config.database import db_connection
from ...config.setting import settings, missing_settings
from ...models.database import HealthResponse
from ...utilities.helpers.date_utils import utc_now

router = APIRouter()

# Collections every tenant-scoped query runs against
TENANT_COLLECTIONS = [
    "users", "events", "badges", "forms", "visitors", "entryLogs", "scanStats", "visitordataset", "messageTemplates",
]


def mongo_host(uri: str) -> str:
    """Host part of the connection string, without credentials"""
    if not uri:
        return "not configured"
    if "@" in uri:
        return uri.split("@", 1)[1]
    return "local"


@router.get("/", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness; the process answers even when MongoDB is down"""
    return HealthResponse(
        status="healthy",
        service="visitrack-api",
        timestamp=utc_now().isoformat(),
        database_connected=db_connection.health_check()
    )


@router.get("/ready")
async def readiness_check():
    """Ready only with complete configuration and a live MongoDB ping"""
    missing = missing_settings()
    db_healthy = db_connection.health_check()

    if missing or not db_healthy:
        logger.warning(f"Readiness check failed: database={'up' if db_healthy else 'down'} missing={missing}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "database": "connected" if db_healthy else "disconnected",
                "missing": missing,
                "ready": False,
            },
        )

    return {"status": "ready", "database": "connected", "missing": [], "ready": True}


@router.get("/status")
async def detailed_status() -> Dict[str, Any]:
    """Detailed system status"""
    missing = missing_settings()

    return {
        "api": {
            "status": "running",
            "version": settings.API_VERSION,
            "environment": getattr(settings, "ENVIRONMENT", "DEV"),
            "debug_mode": settings.DEBUG
        },
        "database": {
            "mongodb": {
                "status": "connected" if db_connection.health_check() else "disconnected",
                "host": mongo_host(settings.MONGODB_URI),
                "database_name": settings.DATABASE_NAME,
                "collections": TENANT_COLLECTIONS
            }
        },
        "configuration": {
            "jwt_configured": bool(settings.JWT_SECRET_KEY),
            "missing": missing,
            "valid": not missing
        },
        "limits": {
            "max_page_size": settings.MAX_PAGE_SIZE,
            "max_upload_bytes": settings.MAX_UPLOAD_SIZE_BYTES
        }
    }
