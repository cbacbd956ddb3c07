"""
Boundary validation for extracted model output.

The extractor only guarantees a JSON array. These functions turn its elements
into InsightRecord / PatternRecord values, filling missing fields with
defaults instead of rejecting the element.
"""

import logging
import math
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from ..models.insights import (
    DEFAULT_CONFIDENCE, POINT_MODELS, ChartType, InsightRecord, PatternRecord, PatternType,
)
from .errors import SchemaLeniencyWarning

logger = logging.getLogger(__name__)


def _lenient(message: str) -> None:
    logger.warning(message, extra={"extra_fields": {"category": SchemaLeniencyWarning.__name__}})


def _confidence(item: Dict[str, Any], index: int) -> float:
    value = item.get("confidence")
    if isinstance(value, str):
        try:
            value = float(value.strip().rstrip("%"))
        except ValueError:
            value = None
    # bool is an int subclass; true is not a score
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            if math.isfinite(value):
                return value
        except OverflowError:
            # ints past float range
            return 100 if value > 0 else 0
    _lenient(f"Element {index} has no usable confidence, defaulting to {DEFAULT_CONFIDENCE}")
    return DEFAULT_CONFIDENCE


def coerce_insights(items: Sequence[Any]) -> List[InsightRecord]:
    """
    Convert extracted elements to InsightRecords.

    Accepts objects with an ``insight`` or ``text`` key, or bare strings.
    Elements with no text at all are dropped.
    """
    records: List[InsightRecord] = []
    for index, item in enumerate(items):
        if isinstance(item, str):
            _lenient(f"Element {index} is a bare string, defaulting confidence to {DEFAULT_CONFIDENCE}")
            text, confidence = item, DEFAULT_CONFIDENCE
        elif isinstance(item, dict):
            text = item.get("insight") or item.get("text")
            confidence = _confidence(item, index)
        else:
            text, confidence = None, DEFAULT_CONFIDENCE

        if not text or not str(text).strip():
            _lenient(f"Element {index} has no insight text, skipping")
            continue
        records.append(InsightRecord(insight=str(text).strip(), confidence=confidence))
    return records


def _enum_or_default(enum_cls, value: Any, default, field: str, index: int):
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        _lenient(f"Element {index} has unknown {field} {value!r}, using '{default.value}'")
        return default


def coerce_pattern(item: Dict[str, Any], index: int = 0) -> Optional[PatternRecord]:
    """Convert one extracted element to a PatternRecord, or None if unusable."""
    pattern_type = _enum_or_default(PatternType, item.get("type"), PatternType.CUSTOM, "type", index)
    chart_type = _enum_or_default(ChartType, item.get("chartType"), ChartType.BAR, "chartType", index)

    point_model = POINT_MODELS[pattern_type]
    raw_points = item.get("data")
    if raw_points is None:
        raw_points = []
    elif not isinstance(raw_points, list):
        _lenient(f"Element {index} has non-list data {type(raw_points).__name__}, defaulting to []")
        raw_points = []

    points = []
    for raw in raw_points:
        if not isinstance(raw, dict):
            continue
        try:
            points.append(point_model.model_validate(raw))
        except ValidationError as e:
            _lenient(f"Element {index} has an unusable data point: {e.error_count()} errors")

    insights = item.get("insights")
    if not isinstance(insights, list):
        _lenient(f"Element {index} has no insights list, defaulting to []")
        insights = []

    try:
        return PatternRecord(
            type=pattern_type,
            title=str(item.get("title") or pattern_type.value.capitalize() + " Pattern"),
            description=str(item.get("description") or ""),
            chart_type=chart_type,
            data=points,
            insights=[str(i) for i in insights],
            confidence=_confidence(item, index),
        )
    except ValidationError as e:
        logger.warning(f"Dropping pattern element {index}: {e}")
        return None


def coerce_patterns(items: Sequence[Any]) -> List[PatternRecord]:
    """Convert extracted elements to PatternRecords, dropping non-objects."""
    records: List[PatternRecord] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            _lenient(f"Pattern element {index} is not an object, skipping")
            continue
        record = coerce_pattern(item, index)
        if record is not None:
            records.append(record)
    return records


def most_confident(patterns: Sequence[PatternRecord]) -> Optional[PatternRecord]:
    """
    The pattern with the highest confidence; the first one wins ties.

    For clients picking the initially selected chart. The API returns
    patterns in model order and does not call this.
    """
    best: Optional[PatternRecord] = None
    for pattern in patterns:
        if best is None or pattern.confidence > best.confidence:
            best = pattern
    return best
