"""API module."""

from .insights import router as insights_router
from .records import router as records_router
from .weather import router as weather_router

__all__ = ['insights_router', 'records_router', 'weather_router']
