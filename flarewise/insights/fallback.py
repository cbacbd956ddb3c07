"""
Fallback Synthesizer - Deterministic local insights when the model is unavailable.

Works on the same summary dicts the prompt builder produces. The confidence
scores are hand-assigned per insight kind and are configurable; they are not
derived from the data.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Sequence

from ..models.insights import ChartType, InsightRecord, PatternRecord, PatternType, WeeklyPoint

logger = logging.getLogger(__name__)

MAX_FALLBACK_INSIGHTS = 5
HIGH_SEVERITY_THRESHOLD = 2.0
WEATHER_ENTRY_THRESHOLD = 5
WEEKLY_FALLBACK_CONFIDENCE = 60


@dataclass(frozen=True)
class FallbackConfidence:
    """Fixed confidence score for each kind of fallback insight."""
    severity: int = 80
    frequency: int = 75
    medication: int = 70
    weather: int = 65
    encouragement: int = 90

    @classmethod
    def from_settings(cls, config: Any) -> "FallbackConfidence":
        return cls(
            severity=config.fallback_confidence_severity,
            frequency=config.fallback_confidence_frequency,
            medication=config.fallback_confidence_medication,
            weather=config.fallback_confidence_weather,
            encouragement=config.fallback_confidence_encouragement,
        )


def synthesize_insights(
    symptoms: Sequence[Dict[str, Any]],
    medications: Sequence[Dict[str, Any]],
    confidences: FallbackConfidence = FallbackConfidence(),
) -> List[InsightRecord]:
    """
    Compute up to five insights from symptom and medication summaries.

    Args:
        symptoms: Symptom summaries (date, severity, symptoms, weather, notes)
        medications: Medication summaries
        confidences: Confidence score per insight kind

    Returns:
        Insights in fixed order; empty when there are no symptom summaries
    """
    if not symptoms:
        return []

    insights: List[InsightRecord] = []

    average = sum(float(s.get("severity", 0)) for s in symptoms) / len(symptoms)
    if average > HIGH_SEVERITY_THRESHOLD:
        advice = "Consider discussing treatment adjustments with your doctor."
    else:
        advice = "Your symptoms appear to be relatively well-managed."
    insights.append(InsightRecord(
        insight=(
            f"Your average symptom severity over the last {len(symptoms)} entries is "
            f"{average:.1f} out of 3. {advice}"
        ),
        confidence=confidences.severity,
    ))

    counts: Counter = Counter()
    for summary in symptoms:
        counts.update(summary.get("symptoms") or [])
    # Counter.most_common keeps first-seen order among ties
    most_common = [name for name, _ in counts.most_common(2)]
    if most_common:
        insights.append(InsightRecord(
            insight=(
                f"Your most frequently reported symptoms are {' and '.join(most_common)}. "
                "Tracking these patterns can help identify triggers and treatment effectiveness."
            ),
            confidence=confidences.frequency,
        ))

    if medications:
        plural = "s" if len(medications) > 1 else ""
        insights.append(InsightRecord(
            insight=(
                f"You're currently tracking {len(medications)} medication{plural}. "
                "Consistent medication tracking helps ensure optimal treatment outcomes."
            ),
            confidence=confidences.medication,
        ))

    weather_entries = sum(1 for s in symptoms if s.get("weather"))
    if weather_entries > WEATHER_ENTRY_THRESHOLD:
        insights.append(InsightRecord(
            insight=(
                f"You have weather data for {weather_entries} symptom entries. "
                "This data can help identify weather-related triggers for your condition."
            ),
            confidence=confidences.weather,
        ))

    insights.append(InsightRecord(
        insight=(
            "Continue logging your symptoms regularly. The more data you collect, "
            "the better insights we can provide about your condition patterns."
        ),
        confidence=confidences.encouragement,
    ))

    return insights[:MAX_FALLBACK_INSIGHTS]


def weekday_buckets(symptoms: Sequence[Dict[str, Any]]) -> List[WeeklyPoint]:
    """
    Mean severity per weekday, in order of first appearance.

    The mean is updated incrementally as each entry arrives.
    """
    buckets: Dict[str, WeeklyPoint] = {}
    for summary in symptoms:
        day = date.fromisoformat(summary["date"]).strftime("%A")
        value = float(summary.get("severity", 0))
        bucket = buckets.get(day)
        if bucket is None:
            buckets[day] = WeeklyPoint(day=day, severity=value, count=1)
            continue
        bucket.severity = (bucket.severity * bucket.count + value) / (bucket.count + 1)
        bucket.count += 1
    return list(buckets.values())


def synthesize_patterns(symptoms: Sequence[Dict[str, Any]]) -> List[PatternRecord]:
    """
    A single weekly bar-chart pattern computed locally.

    Args:
        symptoms: Symptom summaries with ISO ``date`` and ``severity``

    Returns:
        One PatternRecord, or an empty list when there are no summaries
    """
    if not symptoms:
        return []

    return [PatternRecord(
        type=PatternType.WEEKLY,
        title="Weekly Symptom Pattern",
        description="Shows how symptoms vary by day of the week",
        chart_type=ChartType.BAR,
        data=weekday_buckets(symptoms),
        insights=[
            "This visualization shows your symptom patterns by day of week",
            "The data is based on your recorded symptoms",
        ],
        confidence=WEEKLY_FALLBACK_CONFIDENCE,
    )]
