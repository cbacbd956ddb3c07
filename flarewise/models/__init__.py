"""Models module."""

from .records import (
    DEFAULT_SYMPTOM_TYPES, Severity, WeatherSnapshot, SymptomRecord,
    MedicationFrequency, MedicationRecord, EmergencyContact,
)
from .insights import (
    DEFAULT_CONFIDENCE, InsightRecord, PatternType, ChartType, PatternRecord,
    WeeklyPoint, MonthlyPoint, WeatherPoint, MedicationPoint, CustomPoint,
    POINT_MODELS, GenerationResult,
)

__all__ = [
    'DEFAULT_SYMPTOM_TYPES', 'Severity', 'WeatherSnapshot', 'SymptomRecord',
    'MedicationFrequency', 'MedicationRecord', 'EmergencyContact',
    'DEFAULT_CONFIDENCE', 'InsightRecord', 'PatternType', 'ChartType', 'PatternRecord',
    'WeeklyPoint', 'MonthlyPoint', 'WeatherPoint', 'MedicationPoint', 'CustomPoint',
    'POINT_MODELS', 'GenerationResult',
]
