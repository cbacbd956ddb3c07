"""
FlareWise - Main FastAPI Application
"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .config import settings
from .api import insights_router, records_router, weather_router
from .api.deps import get_repository, get_scheduler
from .core.logging_config import setup_logging
from .middleware import RequestLoggingMiddleware

# Logger will be initialized after setup_logging() is called
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    setup_logging(settings)
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Storage path: {settings.local_storage_path} (profile: {settings.storage_profile})")
    logger.info(f"LLM provider: {settings.llm_provider}")
    logger.info(f"Log level: {settings.log_level.upper()}")

    # Restore medication reminders
    scheduler = get_scheduler()
    for medication in await get_repository().list_medications():
        scheduler.sync(medication)
    logger.info(f"Reminders scheduled for {len(scheduler.scheduled_ids())} medication(s)")

    yield
    # Shutdown
    await scheduler.shutdown()
    logger.info(f"Shutting down {settings.app_name}")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Symptom tracking with AI insights for inflammatory conditions",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add request logging middleware (after CORS)
if settings.log_api_requests:
    app.add_middleware(RequestLoggingMiddleware)

# Include routers
app.include_router(insights_router)
app.include_router(weather_router)
app.include_router(records_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "message": "Welcome to FlareWise - track symptoms, spot patterns"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "llm_configured": bool(settings.resolved_llm_api_key),
        "weather_configured": bool(settings.openweathermap_api_key),
        "version": settings.app_version
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "flarewise.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
