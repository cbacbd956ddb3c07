"""
Weather API endpoints - current conditions and seasonal guidance.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..services import WEATHER_TRIGGERS, WeatherService, seasonal_info, simulate_current, simulate_forecast
from .deps import get_weather_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/weather", tags=["weather"])


@router.get("/current")
async def current_weather(
    simulated: bool = Query(default=False),
    weather: WeatherService = Depends(get_weather_service),
):
    """
    Current conditions at the configured location.

    Args:
        simulated: Return seasonal simulated conditions instead of live data
    """
    if simulated:
        return simulate_current().model_dump(by_alias=True)

    snapshot = await weather.fetch_current()
    if snapshot is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Weather data is unavailable"
        )
    return snapshot.model_dump(by_alias=True)


@router.get("/forecast")
async def forecast(days: int = Query(default=5, ge=1, le=14)):
    """Simulated daily forecast."""
    return simulate_forecast(days=days)


@router.get("/seasonal")
async def seasonal():
    """Current season, management tips and known weather triggers."""
    return {**seasonal_info(), "triggers": WEATHER_TRIGGERS}
