"""
Tests for the weather service and seasonal simulation.
"""

import random
from datetime import date

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from flarewise.services.weather import (
    CONDITION_ICONS, WEATHER_TRIGGERS, WeatherService, seasonal_info, simulate_current,
    simulate_forecast, simulate_historical,
)


def _patched_client(mock_client, payload=None, error=None):
    mock_instance = AsyncMock()
    if error is not None:
        mock_instance.get.side_effect = error
    else:
        response = MagicMock()
        response.json.return_value = payload
        response.raise_for_status = MagicMock()
        mock_instance.get.return_value = response
    mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
    mock_instance.__aexit__ = AsyncMock(return_value=False)
    mock_client.return_value = mock_instance
    return mock_instance


class TestSimulation:

    def test_summer_ranges(self):
        rng = random.Random(7)
        for _ in range(50):
            snap = simulate_historical(date(2024, 1, 15), rng)
            assert 28 <= snap.temperature <= 35
            assert 60 <= snap.humidity <= 79
            assert 8 <= snap.uv_index <= 11
            assert snap.feels_like == snap.temperature + 2
            assert CONDITION_ICONS[snap.description] == snap.icon

    def test_winter_ranges(self):
        rng = random.Random(3)
        for _ in range(50):
            snap = simulate_historical(date(2024, 7, 1), rng)
            assert 15 <= snap.temperature <= 24
            assert 40 <= snap.humidity <= 69
            assert 3 <= snap.uv_index <= 7
            assert snap.feels_like == snap.temperature - 1
            assert 1010 <= snap.pressure <= 1024
            assert 5 <= snap.wind_speed <= 24

    def test_current_uses_today(self):
        snap = simulate_current(date(2024, 12, 25), random.Random(1))
        assert snap.temperature >= 28

    def test_forecast(self):
        forecast = simulate_forecast(date(2024, 2, 27), days=3, rng=random.Random(2))
        assert [d["date"] for d in forecast] == ["2024-02-27", "2024-02-28", "2024-02-29"]
        for day in forecast:
            assert day["min_temp"] <= day["temperature"] <= day["max_temp"]


class TestSeasonalInfo:

    @pytest.mark.parametrize("month,season", [
        (12, "Summer"), (2, "Summer"), (3, "Autumn"), (7, "Winter"), (10, "Spring"),
    ])
    def test_season(self, month, season):
        info = seasonal_info(date(2024, month, 1))
        assert info["season"] == season
        assert info["tips"]

    def test_triggers(self):
        assert {t["factor"] for t in WEATHER_TRIGGERS} >= {"High Humidity", "High UV Exposure"}


class TestWeatherService:

    @pytest.mark.asyncio
    async def test_without_key_returns_none(self):
        service = WeatherService(api_key=None, latitude=-27.47, longitude=153.02)
        assert await service.fetch_current() is None

    @pytest.mark.asyncio
    async def test_fetch_current(self):
        payload = {
            "main": {"temp": 24.3, "humidity": 65, "pressure": 1015, "feels_like": 24.9},
            "weather": [{"description": "scattered clouds", "icon": "03d"}],
            "wind": {"speed": 4.1},
        }
        service = WeatherService(api_key="owm-key", latitude=-27.47, longitude=153.02)
        with patch("httpx.AsyncClient") as mock_client:
            instance = _patched_client(mock_client, payload)
            snap = await service.fetch_current()

        assert snap.temperature == 24.3
        assert snap.description == "scattered clouds"
        assert snap.wind_speed == 4.1
        assert snap.uv_index is None
        params = instance.get.call_args.kwargs["params"]
        assert params["units"] == "metric"
        assert params["appid"] == "owm-key"

    @pytest.mark.asyncio
    async def test_fetch_failure_returns_none(self):
        service = WeatherService(api_key="owm-key", latitude=0, longitude=0)
        with patch("httpx.AsyncClient") as mock_client:
            _patched_client(mock_client, error=httpx.ConnectError("offline"))
            assert await service.fetch_current() is None
