"""
Prompt Builder - Turns symptom and medication records into generation prompts.

Records are first projected to small summary dicts so that only the fields
the analysis needs reach the generation service. The prompt text states the
output contract (a bare JSON array of a fixed size) and shows an example.
"""

import json
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..models.records import MedicationRecord, SymptomRecord

INSIGHT_COUNT = 5
PATTERN_COUNT = 4
RECENT_SYMPTOM_LIMIT = 30
PATTERN_SYMPTOM_LIMIT = 50
TIME_RANGES = (3, 6, 12, 24)

INSIGHTS_SYSTEM_PROMPT = (
    "You are a medical data analyst. You ONLY return valid JSON arrays. "
    "Never include explanatory text outside the JSON structure."
)

PATTERNS_SYSTEM_PROMPT = (
    "You are a medical data analysis AI specializing in finding patterns in symptom data. "
    "You ONLY return valid JSON arrays that can be parsed directly. "
    "Never include explanatory text outside the JSON structure."
)

INSIGHTS_EXAMPLE = [
    {"insight": "Your symptoms tend to be worse on weekdays, particularly Monday and Tuesday. "
                "This could indicate work-related stress as a trigger.", "confidence": 75},
    {"insight": "High humidity days (above 70%) correlate with increased joint pain severity. "
                "Consider using a dehumidifier indoors.", "confidence": 82},
]

PATTERNS_EXAMPLE = [
    {
        "type": "weekly",
        "title": "Weekly Symptom Pattern",
        "description": "Shows how symptoms vary by day of the week",
        "chartType": "bar",
        "data": [{"day": "Monday", "severity": 2.1, "count": 3},
                 {"day": "Tuesday", "severity": 1.8, "count": 4}],
        "insights": ["Symptoms peak on Mondays", "Weekends show lower severity"],
        "confidence": 75,
    },
    {
        "type": "monthly",
        "title": "Monthly Trends",
        "description": "Shows symptom trends over months",
        "chartType": "line",
        "data": [{"month": "January", "severity": 2.0, "frequency": 8}],
        "insights": ["Winter shows higher severity"],
        "confidence": 68,
    },
    {
        "type": "weather",
        "title": "Weather Correlation",
        "description": "Shows relationship between weather and symptoms",
        "chartType": "scatter",
        "data": [{"temperature": 25, "severity": 1, "name": "Day 1"}],
        "insights": ["High temperatures correlate with worse symptoms"],
        "confidence": 72,
    },
    {
        "type": "medication",
        "title": "Medication Impact",
        "description": "Shows medication effectiveness over time",
        "chartType": "composed",
        "data": [{"name": "Week 1", "severity": 2.5, "frequency": 5}],
        "insights": ["Consistency improves outcomes"],
        "confidence": 80,
    },
]


@dataclass(frozen=True)
class PromptRequest:
    """System/role string and user prompt for one generation call."""
    system: str
    prompt: str


def _weather_summary(record: SymptomRecord) -> Optional[Dict[str, Any]]:
    if record.weather is None:
        return None
    return {
        "temperature": record.weather.temperature,
        "humidity": record.weather.humidity,
        "description": record.weather.description,
    }


def summarize_symptom(record: SymptomRecord) -> Dict[str, Any]:
    """Project a symptom record to the fields used for insights."""
    return {
        "date": record.date.isoformat(),
        "severity": int(record.severity),
        "symptoms": record.present_symptoms(),
        "weather": _weather_summary(record),
        "notes": record.notes,
    }


def summarize_symptom_for_patterns(record: SymptomRecord) -> Dict[str, Any]:
    """Project a symptom record for pattern analysis (adds weekday and month)."""
    return {
        "date": record.date.isoformat(),
        "day": record.date.strftime("%A"),
        "month": record.date.strftime("%B"),
        "severity": int(record.severity),
        "symptoms": record.present_symptoms(),
        "weather": _weather_summary(record),
    }


def summarize_medication(record: MedicationRecord) -> Dict[str, Any]:
    """Project a medication record to the fields used in prompts."""
    return {
        "name": record.name,
        "dosage": record.dosage,
        "frequency": record.frequency.value,
        "startDate": record.start_date.isoformat(),
        "endDate": record.end_date.isoformat() if record.end_date else "ongoing",
    }


def recent_symptoms(records: Iterable[SymptomRecord], limit: int = RECENT_SYMPTOM_LIMIT) -> List[SymptomRecord]:
    """The most recent `limit` records, oldest first."""
    ordered = sorted(records, key=lambda r: r.date)
    return ordered[-limit:] if limit > 0 else []


def range_start(time_range_months: int, today: date) -> date:
    """First day included in a 3/6/12/24 month analysis window."""
    if time_range_months not in TIME_RANGES:
        raise ValueError(f"Unsupported time range: {time_range_months} months")
    month_index = today.month - 1 - time_range_months
    year = today.year + month_index // 12
    month = month_index % 12 + 1
    # Clamp the day for shorter months (e.g. 31 May minus 3 months)
    for day in (today.day, 30, 29, 28):
        try:
            return date(year, month, day)
        except ValueError:
            continue
    raise ValueError(f"Cannot compute window start for {today}")


def symptoms_in_range(
    records: Iterable[SymptomRecord],
    time_range_months: int,
    today: Optional[date] = None,
) -> List[SymptomRecord]:
    """Records dated on or after the start of the time range, oldest first."""
    start = range_start(time_range_months, today or date.today())
    return sorted((r for r in records if r.date >= start), key=lambda r: r.date)


def medications_in_window(
    records: Iterable[MedicationRecord],
    start: date,
    end: date,
) -> List[MedicationRecord]:
    """Medications whose active date range overlaps [start, end]."""
    return [m for m in records if m.is_active_between(start, end)]


def _format_block(label: str, value: Any) -> str:
    return f"{label}:\n{json.dumps(value, indent=2, ensure_ascii=False)}"


def build_insights_prompt(
    symptoms: Sequence[SymptomRecord],
    medications: Sequence[MedicationRecord],
    symptom_types: Sequence[str],
) -> PromptRequest:
    """
    Build the request for confidence-scored insights.

    Args:
        symptoms: Symptom records, already truncated to the recent window
        medications: Medications active in that window
        symptom_types: The user's ordered list of tracked symptom names

    Returns:
        PromptRequest asking for exactly INSIGHT_COUNT insight objects
    """
    sections = [
        "You are a medical AI assistant. Analyze the patient data and return ONLY a JSON array.",
        _format_block("SYMPTOM DATA", [summarize_symptom(s) for s in symptoms]),
        _format_block("MEDICATION DATA", [summarize_medication(m) for m in medications]),
        _format_block("SYMPTOM TYPES", list(symptom_types)),
        f"Return exactly {INSIGHT_COUNT} insights as a JSON array. Each insight should "
        "identify a pattern and give actionable advice. Each object must have the keys "
        '"insight" (string) and "confidence" (integer 0-100).',
        "IMPORTANT: Your response must be ONLY the JSON array. No text before or after it.",
        "Format example:\n" + json.dumps(INSIGHTS_EXAMPLE, indent=2),
    ]
    return PromptRequest(system=INSIGHTS_SYSTEM_PROMPT, prompt="\n\n".join(sections))


def build_patterns_prompt(
    symptoms: Sequence[SymptomRecord],
    medications: Sequence[MedicationRecord],
    symptom_types: Sequence[str],
    time_range_months: int,
) -> PromptRequest:
    """
    Build the request for chart-ready pattern descriptors.

    Args:
        symptoms: Symptom records inside the time range
        medications: Medications active in the time range
        symptom_types: The user's ordered list of tracked symptom names
        time_range_months: 3, 6, 12 or 24

    Returns:
        PromptRequest asking for exactly PATTERN_COUNT pattern objects
    """
    if time_range_months not in TIME_RANGES:
        raise ValueError(f"Unsupported time range: {time_range_months} months")

    summaries = [summarize_symptom_for_patterns(s) for s in symptoms][:PATTERN_SYMPTOM_LIMIT]
    sections = [
        "Analyze the symptom data and generate visualizations that reveal patterns over time. "
        "Return ONLY a JSON array.",
        _format_block(f"SYMPTOM DATA (last {time_range_months} months)", summaries),
        _format_block("MEDICATION DATA", [summarize_medication(m) for m in medications]),
        _format_block("TRACKED SYMPTOM TYPES", list(symptom_types)),
        f"Return exactly {PATTERN_COUNT} visualization objects: weekly (day of week), "
        "monthly/seasonal, weather correlation and medication impact patterns. Each object "
        'must have the keys "type", "title", "description", "chartType" (one of line, bar, '
        'scatter, radar, composed), "data" (chart-ready points), "insights" (2-3 strings) and '
        '"confidence" (integer 0-100). If a pattern is weak, assign a lower confidence.',
        "IMPORTANT: Your response must be ONLY the JSON array. No text before or after it.",
        "Format example:\n" + json.dumps(PATTERNS_EXAMPLE, indent=2),
    ]
    return PromptRequest(system=PATTERNS_SYSTEM_PROMPT, prompt="\n\n".join(sections))
