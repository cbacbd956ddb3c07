"""Services module - weather lookup and medication reminders."""

from .weather import (
    WEATHER_TRIGGERS, WeatherService, seasonal_info,
    simulate_current, simulate_forecast, simulate_historical,
)
from .reminders import ReminderScheduler, next_occurrence

__all__ = [
    'WEATHER_TRIGGERS', 'WeatherService', 'seasonal_info',
    'simulate_current', 'simulate_forecast', 'simulate_historical',
    'ReminderScheduler', 'next_occurrence',
]
