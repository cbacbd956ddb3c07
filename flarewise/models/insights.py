"""
Insight Models - Structured records produced by the insight pipeline.

InsightRecord and PatternRecord are the two output variants. Pattern chart
points have one model per pattern category, so a weekly pattern always
carries ``day`` while a weather pattern always carries ``temperature``.
"""

import math
from enum import Enum
from typing import Generic, List, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_CONFIDENCE = 70


def clamp_confidence(value) -> int:
    """Round and clamp a confidence score into 0-100."""
    try:
        value = float(value)
    except OverflowError:
        return 100 if value > 0 else 0
    if math.isinf(value):
        return 100 if value > 0 else 0
    return max(0, min(100, int(round(value))))


class InsightRecord(BaseModel):
    """A short observation about the symptom data with a confidence score."""
    insight: str
    confidence: int = DEFAULT_CONFIDENCE

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, value):
        return clamp_confidence(value)


class PatternType(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    WEATHER = "weather"
    MEDICATION = "medication"
    CUSTOM = "custom"


class ChartType(str, Enum):
    LINE = "line"
    BAR = "bar"
    SCATTER = "scatter"
    RADAR = "radar"
    COMPOSED = "composed"


class _Point(BaseModel):
    model_config = ConfigDict(extra="ignore")

    severity: Optional[float] = None

    def label(self) -> Optional[str]:
        """Category-axis label for line/bar/radar/composed charts."""
        return getattr(self, "name", None)

    def x_value(self) -> Optional[float]:
        """Numeric x-axis value for scatter charts."""
        return getattr(self, "value", None)


class WeeklyPoint(_Point):
    day: Optional[str] = None
    count: Optional[int] = None

    def label(self) -> Optional[str]:
        return self.day


class MonthlyPoint(_Point):
    month: Optional[str] = None
    frequency: Optional[float] = None

    def label(self) -> Optional[str]:
        return self.month


class WeatherPoint(_Point):
    temperature: Optional[float] = None
    name: Optional[str] = None

    def x_value(self) -> Optional[float]:
        return self.temperature


class MedicationPoint(_Point):
    name: Optional[str] = None
    frequency: Optional[float] = None
    trend: Optional[float] = None


class CustomPoint(_Point):
    name: Optional[str] = None
    value: Optional[float] = None
    frequency: Optional[float] = None


ChartPoint = Union[WeeklyPoint, MonthlyPoint, WeatherPoint, MedicationPoint, CustomPoint]

POINT_MODELS = {
    PatternType.WEEKLY: WeeklyPoint,
    PatternType.MONTHLY: MonthlyPoint,
    PatternType.WEATHER: WeatherPoint,
    PatternType.MEDICATION: MedicationPoint,
    PatternType.CUSTOM: CustomPoint,
}


class PatternRecord(BaseModel):
    """A chart-ready summary of symptom data along one dimension."""
    model_config = ConfigDict(populate_by_name=True)

    type: PatternType
    title: str
    description: str = ""
    chart_type: ChartType = Field(alias="chartType")
    data: List[ChartPoint] = Field(default_factory=list)
    insights: List[str] = Field(default_factory=list)
    confidence: int = DEFAULT_CONFIDENCE

    @model_validator(mode="before")
    @classmethod
    def _typed_points(cls, values):
        # Build points with the model for this pattern's category
        if not isinstance(values, dict):
            return values
        try:
            point_model = POINT_MODELS[PatternType(values.get("type"))]
        except ValueError:
            return values
        points = values.get("data") or []
        if not isinstance(points, list):
            return values
        return {
            **values,
            "data": [point_model.model_validate(p) if isinstance(p, dict) else p for p in points],
        }

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, value):
        return clamp_confidence(value)

    def is_renderable(self) -> bool:
        """
        Whether every point carries the fields its chart kind needs.

        Scatter charts need a numeric x-field and a numeric severity; the
        other kinds need a category label and a numeric severity.
        """
        if not self.data:
            return False
        for point in self.data:
            if point.severity is None:
                return False
            if self.chart_type == ChartType.SCATTER:
                if point.x_value() is None:
                    return False
            elif not point.label():
                return False
        return True


T = TypeVar("T")


class GenerationResult(BaseModel, Generic[T]):
    """
    Outcome of one generate action.

    ``source`` tells the caller whether the data came from the model, from
    local fallback synthesis, or was empty because there was nothing to
    analyze. ``notice`` carries the informational banner text for fallbacks.
    """
    success: bool = True
    data: List[T] = Field(default_factory=list)
    error: Optional[str] = None
    source: Literal["ai", "fallback", "empty"] = "ai"
    notice: Optional[str] = None
