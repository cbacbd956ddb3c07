"""
Unit tests for local fallback insights and patterns.
"""

from flarewise.config import Settings
from flarewise.insights.fallback import (
    FallbackConfidence, synthesize_insights, synthesize_patterns, weekday_buckets,
)
from flarewise.models import ChartType, PatternType


def _summary(day, severity, symptoms=(), weather=None):
    return {"date": day, "severity": severity, "symptoms": list(symptoms), "weather": weather}


class TestSynthesizeInsights:

    def test_empty_input(self):
        assert synthesize_insights([], []) == []

    def test_high_average_recommends_doctor(self):
        symptoms = [_summary(f"2024-03-0{i + 1}", s) for i, s in enumerate([3, 3, 2, 2, 2])]
        insights = synthesize_insights(symptoms, [])
        first = insights[0]
        assert "2.4 out of 3" in first.insight
        assert "Consider discussing treatment adjustments with your doctor." in first.insight
        assert first.confidence == 80

    def test_average_of_exactly_two_is_well_managed(self):
        symptoms = [_summary("2024-03-01", 2), _summary("2024-03-02", 2)]
        first = synthesize_insights(symptoms, [])[0]
        assert "2.0 out of 3" in first.insight
        assert "relatively well-managed" in first.insight

    def test_top_two_symptoms(self):
        symptoms = [
            _summary("2024-03-01", 1, ["Pain", "Fatigue"]),
            _summary("2024-03-02", 1, ["Fatigue", "Swelling"]),
            _summary("2024-03-03", 1, ["Fatigue", "Pain"]),
        ]
        frequency = synthesize_insights(symptoms, [])[1]
        assert "Fatigue and Pain" in frequency.insight
        assert frequency.confidence == 75

    def test_medication_plural(self):
        symptoms = [_summary("2024-03-01", 1)]
        one = synthesize_insights(symptoms, [{"name": "A"}])
        two = synthesize_insights(symptoms, [{"name": "A"}, {"name": "B"}])
        assert any("tracking 1 medication." in i.insight for i in one)
        assert any("tracking 2 medications." in i.insight for i in two)

    def test_weather_insight_needs_more_than_five(self):
        five = [_summary(f"2024-03-0{i + 1}", 1, weather={"temperature": 25}) for i in range(5)]
        six = five + [_summary("2024-03-06", 1, weather={"temperature": 26})]
        assert not any("weather data" in i.insight for i in synthesize_insights(five, []))
        weather = [i for i in synthesize_insights(six, []) if "weather data" in i.insight]
        assert weather[0].confidence == 65

    def test_capped_at_five_with_encouragement_last(self):
        symptoms = [_summary(f"2024-03-{i + 10}", 2, ["Pain"], {"temperature": 25}) for i in range(8)]
        insights = synthesize_insights(symptoms, [{"name": "A"}])
        assert len(insights) == 5
        assert insights[-1].confidence == 90
        assert insights[-1].insight.startswith("Continue logging")

    def test_only_severity_and_encouragement(self):
        insights = synthesize_insights([_summary("2024-03-01", 0)], [])
        assert [i.confidence for i in insights] == [80, 90]

    def test_configured_confidences(self):
        config = Settings(fallback_confidence_severity=55, fallback_confidence_encouragement=50)
        confidences = FallbackConfidence.from_settings(config)
        insights = synthesize_insights([_summary("2024-03-01", 1)], [], confidences)
        assert [i.confidence for i in insights] == [55, 50]


class TestSynthesizePatterns:

    def test_empty_input(self):
        assert synthesize_patterns([]) == []

    def test_monday_mean(self):
        # 2024-03-04 and 2024-03-11 are Mondays
        buckets = weekday_buckets([_summary("2024-03-04", 1), _summary("2024-03-11", 3)])
        assert len(buckets) == 1
        assert buckets[0].day == "Monday"
        assert buckets[0].severity == 2.0
        assert buckets[0].count == 2

    def test_first_appearance_order(self):
        buckets = weekday_buckets([
            _summary("2024-03-06", 1),  # Wednesday
            _summary("2024-03-04", 2),  # Monday
            _summary("2024-03-13", 3),  # Wednesday
        ])
        assert [b.day for b in buckets] == ["Wednesday", "Monday"]
        assert buckets[0].severity == 2.0

    def test_single_weekly_bar_pattern(self):
        patterns = synthesize_patterns([_summary("2024-03-04", 1), _summary("2024-03-05", 2)])
        assert len(patterns) == 1
        pattern = patterns[0]
        assert pattern.type == PatternType.WEEKLY
        assert pattern.chart_type == ChartType.BAR
        assert pattern.confidence == 60
        assert len(pattern.insights) == 2
        assert pattern.is_renderable()
