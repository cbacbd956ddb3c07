"""
Unit tests for prompt construction and record selection.
"""

import json
from datetime import date, timedelta

import pytest

from conftest import make_medication, make_symptom
from flarewise.insights.prompt_builder import (
    INSIGHTS_SYSTEM_PROMPT, PATTERN_SYMPTOM_LIMIT, PATTERNS_SYSTEM_PROMPT,
    build_insights_prompt, build_patterns_prompt, medications_in_window, range_start,
    recent_symptoms, summarize_medication, summarize_symptom, summarize_symptom_for_patterns,
    symptoms_in_range,
)


class TestSummaries:

    def test_symptom_summary(self, weather):
        record = make_symptom(date(2024, 3, 4), severity=2,
                              symptoms={"Pain": True, "Fatigue": False, "Stiffness": True},
                              weather=weather, notes="rough morning")
        summary = summarize_symptom(record)
        assert summary == {
            "date": "2024-03-04",
            "severity": 2,
            "symptoms": ["Pain", "Stiffness"],
            "weather": {"temperature": 27.0, "humidity": 72, "description": "few clouds"},
            "notes": "rough morning",
        }

    def test_pattern_summary_adds_day_and_month(self):
        summary = summarize_symptom_for_patterns(make_symptom(date(2024, 3, 4), notes="private"))
        assert summary["day"] == "Monday"
        assert summary["month"] == "March"
        assert "notes" not in summary
        assert summary["weather"] is None

    def test_ongoing_medication(self):
        summary = summarize_medication(make_medication(start=date(2024, 1, 1)))
        assert summary["endDate"] == "ongoing"
        assert summary["frequency"] == "daily"


class TestSelection:

    def test_recent_symptoms_keeps_last_30(self):
        start = date(2024, 1, 1)
        records = [make_symptom(start + timedelta(days=i)) for i in range(40)]
        recent = recent_symptoms(reversed(records))
        assert len(recent) == 30
        assert recent[0].date == start + timedelta(days=10)
        assert recent[-1].date == start + timedelta(days=39)

    @pytest.mark.parametrize("months,expected", [
        (3, date(2024, 2, 29)),
        (6, date(2023, 11, 30)),
        (12, date(2023, 5, 31)),
        (24, date(2022, 5, 31)),
    ])
    def test_range_start_clamps_day(self, months, expected):
        assert range_start(months, date(2024, 5, 31)) == expected

    def test_range_start_rejects_other_ranges(self):
        with pytest.raises(ValueError, match="Unsupported time range"):
            range_start(9, date(2024, 5, 31))

    def test_symptoms_in_range(self):
        today = date(2024, 6, 15)
        records = [make_symptom(date(2024, 1, 1)), make_symptom(date(2024, 3, 15)),
                   make_symptom(date(2024, 6, 1))]
        assert [r.date for r in symptoms_in_range(records, 3, today)] == [
            date(2024, 3, 15), date(2024, 6, 1)
        ]

    def test_medications_in_window(self):
        meds = [
            make_medication("Old", start=date(2023, 1, 1), end=date(2023, 6, 1)),
            make_medication("Ongoing", start=date(2023, 1, 1)),
            make_medication("Future", start=date(2025, 1, 1)),
        ]
        active = medications_in_window(meds, date(2024, 1, 1), date(2024, 2, 1))
        assert [m.name for m in active] == ["Ongoing"]


class TestPrompts:

    def test_insights_prompt(self, recent_entries):
        request = build_insights_prompt(recent_entries, [make_medication()], ["Pain", "Fatigue"])
        assert request.system == INSIGHTS_SYSTEM_PROMPT
        assert "Return exactly 5 insights" in request.prompt
        assert "Methotrexate" in request.prompt
        assert json.dumps(["Pain", "Fatigue"], indent=2) in request.prompt

    def test_patterns_prompt_caps_summaries(self):
        start = date(2024, 1, 1)
        records = [make_symptom(start + timedelta(days=i)) for i in range(PATTERN_SYMPTOM_LIMIT + 10)]
        request = build_patterns_prompt(records, [], ["Pain"], 6)
        assert request.system == PATTERNS_SYSTEM_PROMPT
        assert "last 6 months" in request.prompt
        assert "Return exactly 4 visualization objects" in request.prompt
        assert request.prompt.count('"day":') == PATTERN_SYMPTOM_LIMIT + 2  # plus the example points

    def test_patterns_prompt_rejects_bad_range(self, recent_entries):
        with pytest.raises(ValueError):
            build_patterns_prompt(recent_entries, [], [], 5)
