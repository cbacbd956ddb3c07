"""
Health Record Models - Symptom, medication, weather and contact records.
"""

import re
import uuid
from datetime import date
from enum import Enum, IntEnum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

DEFAULT_SYMPTOM_TYPES = [
    "Pain",
    "Fatigue",
    "Stiffness",
    "Swelling",
    "Redness",
    "Fever",
    "Limited Mobility",
]


def _new_id() -> str:
    return str(uuid.uuid4())


class Severity(IntEnum):
    """Ordinal symptom severity on a 0-3 scale."""
    NONE = 0
    MILD = 1
    MODERATE = 2
    SEVERE = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


class WeatherSnapshot(BaseModel):
    """Weather conditions attached to a symptom entry. Immutable once created."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    temperature: Optional[float] = None  # °C
    humidity: Optional[float] = None  # %
    pressure: Optional[float] = None  # hPa
    description: Optional[str] = None
    icon: Optional[str] = None
    wind_speed: Optional[float] = Field(default=None, alias="windSpeed")
    uv_index: Optional[float] = Field(default=None, alias="uvIndex")
    feels_like: Optional[float] = Field(default=None, alias="feelsLike")


class SymptomRecord(BaseModel):
    """One day's symptom log."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=_new_id)
    date: date
    severity: Severity = Severity.MILD
    symptoms: Dict[str, bool] = Field(default_factory=dict)
    notes: str = ""
    weather: Optional[WeatherSnapshot] = None

    def present_symptoms(self) -> List[str]:
        """Names of the symptoms marked present, in mapping order."""
        return [name for name, present in self.symptoms.items() if present]


class MedicationFrequency(str, Enum):
    DAILY = "daily"
    TWICE_DAILY = "twice-daily"
    THREE_TIMES_DAILY = "three-times-daily"
    WEEKLY = "weekly"
    AS_NEEDED = "as-needed"
    OTHER = "other"


class MedicationRecord(BaseModel):
    """A tracked medication and its reminder times."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=_new_id)
    name: str
    dosage: str = ""
    frequency: MedicationFrequency = MedicationFrequency.DAILY
    times: List[str] = Field(default_factory=list)
    notes: str = ""
    start_date: date = Field(alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")  # None means ongoing
    reminder_enabled: bool = Field(default=False, alias="reminderEnabled")

    @field_validator("times")
    @classmethod
    def _check_times(cls, value: List[str]) -> List[str]:
        for item in value:
            if not _TIME_RE.match(item):
                raise ValueError(f"Invalid reminder time '{item}', expected HH:MM")
        return value

    def is_active_between(self, start: date, end: date) -> bool:
        """Whether the medication's active range overlaps [start, end]."""
        effective_end = self.end_date or end
        return self.start_date <= end and effective_end >= start


class EmergencyContact(BaseModel):
    """Person to call in an emergency."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=_new_id)
    name: str
    relationship: str = ""
    phone: str
    is_primary: bool = Field(default=False, alias="isPrimary")
    notes: Optional[str] = None
