"""
Insight pipeline errors.
"""

from typing import List, Optional


class InsightError(Exception):
    """Base class for insight pipeline errors."""


class TransportError(InsightError):
    """The generation service call failed or timed out."""


class ExtractionError(InsightError):
    """No extraction strategy recovered a JSON array from the model output."""

    def __init__(self, message: str, reasons: Optional[List[str]] = None):
        super().__init__(message)
        self.reasons = reasons or []


class InsufficientDataError(InsightError):
    """Too few symptom entries to justify an analysis."""

    def __init__(self, message: str, count: int, minimum: int):
        super().__init__(message)
        self.count = count
        self.minimum = minimum


class RequestInProgressError(InsightError):
    """A generate request is already running for this view."""


class SchemaLeniencyWarning(UserWarning):
    """An extracted element was missing a field and a default was used."""
