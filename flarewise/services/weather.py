"""
Weather Service - Current conditions for symptom entries.

Live data comes from OpenWeatherMap. When no key is configured, or for
demos and tests, conditions can be simulated from Brisbane's seasonal
patterns instead.
"""

import httpx
import logging
import random
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from ..models.records import WeatherSnapshot

logger = logging.getLogger(__name__)

OPENWEATHERMAP_URL = "https://api.openweathermap.org/data/2.5/weather"

SUMMER_CONDITIONS = ["clear sky", "few clouds", "scattered clouds", "broken clouds",
                     "shower rain", "thunderstorm"]
OTHER_CONDITIONS = ["clear sky", "few clouds", "scattered clouds", "broken clouds", "light rain"]

CONDITION_ICONS = {
    "clear sky": "01d",
    "few clouds": "02d",
    "scattered clouds": "03d",
    "broken clouds": "04d",
    "shower rain": "09d",
    "light rain": "10d",
    "thunderstorm": "11d",
}

WEATHER_TRIGGERS = [
    {
        "factor": "High Humidity",
        "impact": "May increase joint pain and stiffness, especially during humid summers",
        "management": "Use air conditioning to reduce indoor humidity, plan activities for early morning",
    },
    {
        "factor": "Rapid Weather Changes",
        "impact": "Storm season can bring rapid barometric pressure changes that may trigger flares",
        "management": "Monitor weather forecasts, prepare medications before expected weather changes",
    },
    {
        "factor": "High UV Exposure",
        "impact": "High UV levels can trigger certain inflammatory skin conditions",
        "management": "Use sun protection, limit outdoor activities during peak UV hours (10am-3pm)",
    },
    {
        "factor": "Temperature Extremes",
        "impact": "Summer heat can worsen fatigue and inflammation; winter evenings can increase joint stiffness",
        "management": "Maintain comfortable indoor temperatures, dress appropriately for conditions",
    },
]

SEASONS = {
    "Summer": {
        "months": (12, 1, 2),
        "description": "Hot and humid with afternoon thunderstorms common. High UV index.",
        "tips": [
            "Stay hydrated",
            "Use sun protection",
            "Be aware that heat and humidity may worsen inflammatory symptoms",
            "Plan outdoor activities for early morning or evening",
        ],
    },
    "Autumn": {
        "months": (3, 4, 5),
        "description": "Mild temperatures with decreasing humidity. Pleasant weather overall.",
        "tips": [
            "Good time for outdoor activities",
            "Weather changes may trigger symptoms in some people",
            "Still use sun protection on clear days",
        ],
    },
    "Winter": {
        "months": (6, 7, 8),
        "description": "Mild, dry days with cool nights. Low humidity and minimal rainfall.",
        "tips": [
            "Temperature drops at night may trigger joint pain",
            "Lower humidity may help reduce certain inflammatory symptoms",
            "Still use sun protection as UV can be significant even in winter",
        ],
    },
    "Spring": {
        "months": (9, 10, 11),
        "description": "Warming temperatures with increasing humidity. Potential for storms later in the season.",
        "tips": [
            "Pollen counts increase and may affect allergic components of your condition",
            "Good time to establish outdoor exercise routines before summer heat",
            "Monitor for early storm season impacts",
        ],
    },
}


def is_summer(day: date) -> bool:
    """Southern-hemisphere summer: December to February."""
    return day.month in (12, 1, 2)


def seasonal_info(day: Optional[date] = None) -> Dict[str, Any]:
    """Season name, description and symptom-management tips for a date."""
    day = day or date.today()
    for name, season in SEASONS.items():
        if day.month in season["months"]:
            return {"season": name, "description": season["description"], "tips": list(season["tips"])}
    raise ValueError(f"No season for month {day.month}")


def simulate_conditions(day: date, rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """Random but seasonally plausible conditions for one day."""
    rng = rng or random.Random()
    summer = is_summer(day)

    temperature = rng.randint(28, 35) if summer else rng.randint(15, 24)
    humidity = rng.randint(60, 79) if summer else rng.randint(40, 69)
    condition = rng.choice(SUMMER_CONDITIONS if summer else OTHER_CONDITIONS)

    return {
        "temperature": temperature,
        "feels_like": temperature + (2 if summer else -1),
        "humidity": humidity,
        "pressure": rng.randint(1010, 1024),
        "description": condition,
        "icon": CONDITION_ICONS[condition],
        "wind_speed": rng.randint(5, 24),
        "uv_index": rng.randint(8, 11) if summer else rng.randint(3, 7),
    }


def simulate_current(today: Optional[date] = None, rng: Optional[random.Random] = None) -> WeatherSnapshot:
    return WeatherSnapshot(**simulate_conditions(today or date.today(), rng))


def simulate_historical(day: date, rng: Optional[random.Random] = None) -> WeatherSnapshot:
    return WeatherSnapshot(**simulate_conditions(day, rng))


def simulate_forecast(
    today: Optional[date] = None,
    days: int = 5,
    rng: Optional[random.Random] = None,
) -> List[Dict[str, Any]]:
    """Daily forecast entries with min/max temperatures."""
    today = today or date.today()
    rng = rng or random.Random()
    forecast = []
    for offset in range(days):
        day = today + timedelta(days=offset)
        conditions = simulate_conditions(day, rng)
        temperature = conditions["temperature"]
        forecast.append({
            "date": day.isoformat(),
            **conditions,
            "min_temp": temperature - rng.randint(0, 4),
            "max_temp": temperature + rng.randint(0, 4),
        })
    return forecast


class WeatherService:
    """
    OpenWeatherMap client for the configured location.
    """

    def __init__(
        self,
        api_key: Optional[str],
        latitude: float,
        longitude: float,
        timeout: float = 10.0,
    ):
        """
        Args:
            api_key: OpenWeatherMap API key; without one fetch_current returns None
            latitude: Location latitude
            longitude: Location longitude
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.latitude = latitude
        self.longitude = longitude
        self.timeout = timeout

    async def fetch_current(self) -> Optional[WeatherSnapshot]:
        """
        Fetch current conditions.

        Returns:
            WeatherSnapshot, or None if not configured or the request failed
        """
        if not self.api_key:
            logger.debug("Weather lookup skipped: no API key configured")
            return None

        params = {
            "lat": self.latitude,
            "lon": self.longitude,
            "appid": self.api_key,
            "units": "metric",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(OPENWEATHERMAP_URL, params=params)
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Weather data fetch failed: {e}")
            return None

        main = data.get("main") or {}
        weather = (data.get("weather") or [{}])[0]
        return WeatherSnapshot(
            temperature=main.get("temp"),
            humidity=main.get("humidity"),
            pressure=main.get("pressure"),
            description=weather.get("description"),
            icon=weather.get("icon"),
            wind_speed=(data.get("wind") or {}).get("speed"),
            uv_index=data.get("uvi"),
            feels_like=main.get("feels_like"),
        )
