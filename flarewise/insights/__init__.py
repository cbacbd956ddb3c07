"""Insights module - prompt building, response extraction and fallback analysis."""

from .errors import (
    InsightError, TransportError, ExtractionError, InsufficientDataError,
    RequestInProgressError, SchemaLeniencyWarning,
)
from .extractor import extract_json_array
from .fallback import FallbackConfidence, synthesize_insights, synthesize_patterns
from .pipeline import InsightPipeline
from .session import (
    MIN_INSIGHT_ENTRIES, MIN_PATTERN_ENTRIES, ResultHolder, ensure_enough_data, run_guarded,
)

__all__ = [
    'InsightError', 'TransportError', 'ExtractionError', 'InsufficientDataError',
    'RequestInProgressError', 'SchemaLeniencyWarning',
    'extract_json_array',
    'FallbackConfidence', 'synthesize_insights', 'synthesize_patterns',
    'InsightPipeline',
    'MIN_INSIGHT_ENTRIES', 'MIN_PATTERN_ENTRIES', 'ResultHolder', 'ensure_enough_data', 'run_guarded',
]
