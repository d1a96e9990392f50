# visitrack/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from loguru import logger

from .config.setting import settings, validate_settings
from .config.database import db_connection
from .config.logging_config import setup_logging
from .api.routes import (
    auth, badges, entry_log, events, forms, health, message_templates, users, visitor_dataset, visitors
)
from .models.errors import ErrorResponse

setup_logging(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info("Starting VisiTrack API...")

    try:
        validate_settings()
        logger.info("Configuration validated successfully")
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        raise

    if not db_connection.connect():
        logger.error("Failed to connect to MongoDB")
        raise RuntimeError("Database connection failed")

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down VisiTrack API...")
    db_connection.disconnect()
    logger.info("Application shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    debug=settings.DEBUG,
    docs_url=settings.DOCS_URL,
    redoc_url=settings.REDOC_URL,
    openapi_url=settings.OPENAPI_URL,
    lifespan=lifespan,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    }
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)

# Include routers
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(auth.router, prefix=settings.API_PREFIX, tags=["auth"])
app.include_router(users.router, prefix=settings.API_PREFIX, tags=["users"])
app.include_router(events.router, prefix=settings.API_PREFIX, tags=["events"])
app.include_router(badges.router, prefix=settings.API_PREFIX, tags=["badges"])
app.include_router(forms.router, prefix=settings.API_PREFIX, tags=["forms"])
app.include_router(visitors.router, prefix=settings.API_PREFIX, tags=["visitors"])
app.include_router(entry_log.router, prefix=settings.API_PREFIX, tags=["entry-log"])
app.include_router(visitor_dataset.router, prefix=settings.API_PREFIX, tags=["visitor-dataset"])
app.include_router(message_templates.router, prefix=settings.API_PREFIX, tags=["message-templates"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "VisiTrack API",
        "version": settings.API_VERSION,
        "status": "running",
        "debug_mode": settings.DEBUG
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("visitrack.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.DEBUG)
