"""
Shared API dependencies - storage, pipeline, weather and reminder services.

Each getter builds its service once from settings. Tests replace them through
``app.dependency_overrides``.
"""

import logging
from typing import Optional

from ..config import settings
from ..insights import FallbackConfidence, InsightPipeline
from ..llm import provider_from_settings
from ..services import ReminderScheduler, WeatherService
from ..storage import LocalStorage, RecordRepository

logger = logging.getLogger(__name__)

_repository: Optional[RecordRepository] = None
_pipeline: Optional[InsightPipeline] = None
_weather: Optional[WeatherService] = None
_scheduler: Optional[ReminderScheduler] = None


def log_reminder(title: str, body: str):
    """Default reminder sink: write the reminder to the application log."""
    logger.info(f"Reminder: {title} - {body}")


def get_repository() -> RecordRepository:
    global _repository
    if _repository is None:
        storage = LocalStorage(settings.local_storage_path)
        _repository = RecordRepository(storage, settings.storage_profile)
    return _repository


def get_pipeline() -> InsightPipeline:
    global _pipeline
    if _pipeline is None:
        provider = provider_from_settings(settings)
        if provider is None:
            logger.warning("No LLM API key configured; insights will use local analysis")
        _pipeline = InsightPipeline(provider, FallbackConfidence.from_settings(settings))
    return _pipeline


def get_weather_service() -> WeatherService:
    global _weather
    if _weather is None:
        _weather = WeatherService(
            api_key=settings.openweathermap_api_key,
            latitude=settings.weather_latitude,
            longitude=settings.weather_longitude,
            timeout=settings.weather_timeout,
        )
    return _weather


def get_scheduler() -> ReminderScheduler:
    global _scheduler
    if _scheduler is None:
        _scheduler = ReminderScheduler(log_reminder)
    return _scheduler
