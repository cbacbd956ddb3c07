"""
Shared test fixtures and configuration.
"""

import pytest
import os
from datetime import date, timedelta

# Set test environment variables before importing app modules
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOCAL_STORAGE_PATH", "/tmp/flarewise_test_data")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("LLM_API_KEY", "")
os.environ.setdefault("GROQ_API_KEY", "")
os.environ.setdefault("OPENWEATHERMAP_API_KEY", "")

from flarewise.models import MedicationRecord, SymptomRecord, WeatherSnapshot  # noqa: E402
from flarewise.storage import LocalStorage, RecordRepository  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


def make_symptom(day: date, severity: int = 1, symptoms=None, weather=None, notes="") -> SymptomRecord:
    return SymptomRecord(
        date=day,
        severity=severity,
        symptoms=symptoms if symptoms is not None else {"Pain": True, "Fatigue": False},
        notes=notes,
        weather=weather,
    )


def make_medication(name="Methotrexate", start=date(2024, 1, 1), end=None, **kwargs) -> MedicationRecord:
    return MedicationRecord(
        name=name,
        dosage=kwargs.pop("dosage", "10mg"),
        start_date=start,
        end_date=end,
        **kwargs,
    )


@pytest.fixture
def weather():
    return WeatherSnapshot(temperature=27.0, humidity=72, pressure=1012, description="few clouds",
                           wind_speed=11, uv_index=9, feels_like=29)


@pytest.fixture
def recent_entries():
    """Twelve consecutive daily entries ending yesterday."""
    today = date.today()
    return [
        make_symptom(today - timedelta(days=12 - i), severity=(i % 3) + 1)
        for i in range(12)
    ]


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "data"))


@pytest.fixture
def repo(storage):
    return RecordRepository(storage, profile="test")
