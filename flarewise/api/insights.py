"""
Insights API endpoints - AI insights and pattern visualizations.
"""

import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from ..insights import (
    MIN_INSIGHT_ENTRIES, MIN_PATTERN_ENTRIES, InsightPipeline, InsufficientDataError,
    ensure_enough_data,
)
from ..insights.prompt_builder import (
    TIME_RANGES, medications_in_window, range_start, recent_symptoms, symptoms_in_range,
)
from ..models import (
    DEFAULT_SYMPTOM_TYPES, GenerationResult, InsightRecord, MedicationRecord, PatternRecord,
    SymptomRecord,
)
from .deps import get_pipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/insights", tags=["insights"])


class InsightsRequest(BaseModel):
    """Records to analyse."""
    model_config = ConfigDict(populate_by_name=True)

    symptoms: List[SymptomRecord] = Field(default_factory=list)
    medications: List[MedicationRecord] = Field(default_factory=list)
    symptom_types: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SYMPTOM_TYPES), alias="symptomTypes"
    )


class PatternsRequest(InsightsRequest):
    time_range: int = Field(default=6, alias="timeRange")


def _unprocessable(e: InsufficientDataError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.post("/generate", response_model=GenerationResult[InsightRecord])
async def generate_insights(
    body: InsightsRequest,
    pipeline: InsightPipeline = Depends(get_pipeline),
):
    """
    Generate up to five insights from the most recent 30 symptom entries.

    Returns:
        GenerationResult; ``source`` tells whether the AI or local analysis answered
    """
    try:
        ensure_enough_data(len(body.symptoms), MIN_INSIGHT_ENTRIES, "generate insights")
    except InsufficientDataError as e:
        raise _unprocessable(e)

    recent = recent_symptoms(body.symptoms)
    medications = medications_in_window(body.medications, recent[0].date, recent[-1].date)
    logger.info(
        f"Generating insights from {len(recent)} entries",
        extra={"extra_fields": {"entries": len(recent), "medications": len(medications)}}
    )
    return await pipeline.generate_insights(recent, medications, body.symptom_types)


@router.post("/patterns", response_model=GenerationResult[PatternRecord])
async def generate_patterns(
    body: PatternsRequest,
    pipeline: InsightPipeline = Depends(get_pipeline),
):
    """
    Generate up to four chart-ready patterns for the selected time range.

    Returns:
        GenerationResult of pattern records
    """
    if body.time_range not in TIME_RANGES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"timeRange must be one of {', '.join(str(r) for r in TIME_RANGES)}"
        )

    in_range = symptoms_in_range(body.symptoms, body.time_range)
    try:
        ensure_enough_data(len(in_range), MIN_PATTERN_ENTRIES, "generate pattern visualizations")
    except InsufficientDataError as e:
        raise _unprocessable(e)

    today = date.today()
    medications = medications_in_window(body.medications, range_start(body.time_range, today), today)
    logger.info(
        f"Generating patterns from {len(in_range)} entries over {body.time_range} months",
        extra={"extra_fields": {"entries": len(in_range), "time_range": body.time_range}}
    )
    return await pipeline.generate_pattern_visualizations(
        in_range, medications, body.symptom_types, body.time_range
    )
