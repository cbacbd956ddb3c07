"""
Insight Pipeline - Prompt, generate, extract, validate, or fall back.

One call per user-initiated generate action. The only suspension point is the
generation call; every failure after the inputs are accepted degrades to the
local fallback synthesizer instead of surfacing as an error.
"""

import logging
from typing import Awaitable, Callable, List, Protocol, Sequence, Union

from ..models.insights import GenerationResult, InsightRecord, PatternRecord
from ..models.records import MedicationRecord, SymptomRecord
from ..core.logging_config import truncate_large_data
from .errors import ExtractionError, TransportError
from .extractor import extract_json_array
from .fallback import FallbackConfidence, synthesize_insights, synthesize_patterns
from .prompt_builder import (
    INSIGHT_COUNT, PATTERN_COUNT, PromptRequest, build_insights_prompt, build_patterns_prompt,
    summarize_medication, summarize_symptom, summarize_symptom_for_patterns,
)
from .validation import coerce_insights, coerce_patterns

logger = logging.getLogger(__name__)

INSIGHTS_FALLBACK_NOTICE = "AI response could not be processed. Showing basic analysis instead."
PATTERNS_FALLBACK_NOTICE = (
    "AI response could not be processed correctly. Showing simplified visualization instead."
)


class TextGenerator(Protocol):
    async def generate(self, system: str, prompt: str) -> str: ...


GenerateFn = Callable[[str, str], Awaitable[str]]


class InsightPipeline:
    """
    Stateless insight and pattern generation over a text-generation service.

    Args:
        generator: An object with ``async generate(system, prompt)`` (such as
            an LLMProvider), a bare async callable with that signature, or
            None to always use local analysis
        confidences: Confidence scores for fallback insights
    """

    def __init__(
        self,
        generator: Union[TextGenerator, GenerateFn, None],
        confidences: FallbackConfidence = FallbackConfidence(),
    ):
        if generator is not None and hasattr(generator, "generate"):
            self._generate: GenerateFn = generator.generate
        else:
            self._generate = generator
        self.confidences = confidences

    async def _call(self, request: PromptRequest) -> str:
        if self._generate is None:
            raise TransportError("No generation service configured")
        try:
            text = await self._generate(request.system, request.prompt)
        except TransportError:
            raise
        except Exception as e:
            raise TransportError(str(e)) from e
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Generation response: {truncate_large_data(text or '', 500)}")
        return text or ""

    async def generate_insights(
        self,
        symptoms: Sequence[SymptomRecord],
        medications: Sequence[MedicationRecord],
        symptom_types: Sequence[str],
    ) -> GenerationResult[InsightRecord]:
        """
        Produce up to five insights for the given records.

        Args:
            symptoms: Recent symptom records (the caller keeps the last 30)
            medications: Medications active in the same window
            symptom_types: Ordered tracked symptom names

        Returns:
            GenerationResult with ``source`` "ai", "fallback" or "empty"
        """
        if not symptoms:
            return GenerationResult[InsightRecord](success=True, data=[], source="empty")

        symptom_summaries = [summarize_symptom(s) for s in symptoms]
        medication_summaries = [summarize_medication(m) for m in medications]
        request = build_insights_prompt(symptoms, medications, symptom_types)

        try:
            items = extract_json_array(await self._call(request))
            insights = coerce_insights(items)[:INSIGHT_COUNT]
        except (TransportError, ExtractionError) as e:
            logger.warning(
                f"Insight generation degraded to local analysis: {type(e).__name__}: {e}",
                extra={"extra_fields": {"reasons": getattr(e, "reasons", [])}}
            )
            insights = []

        if insights:
            logger.info(f"Generated {len(insights)} AI insights from {len(symptoms)} entries")
            return GenerationResult[InsightRecord](success=True, data=insights, source="ai")

        fallback = synthesize_insights(symptom_summaries, medication_summaries, self.confidences)
        return GenerationResult[InsightRecord](
            success=True, data=fallback, source="fallback", notice=INSIGHTS_FALLBACK_NOTICE
        )

    async def generate_pattern_visualizations(
        self,
        symptoms: Sequence[SymptomRecord],
        medications: Sequence[MedicationRecord],
        symptom_types: Sequence[str],
        time_range_months: int,
    ) -> GenerationResult[PatternRecord]:
        """
        Produce up to four chart-ready patterns for the given records.

        Args:
            symptoms: Symptom records inside the time range
            medications: Medications active in the time range
            symptom_types: Ordered tracked symptom names
            time_range_months: 3, 6, 12 or 24

        Returns:
            GenerationResult with ``source`` "ai", "fallback" or "empty"
        """
        if not symptoms:
            return GenerationResult[PatternRecord](success=True, data=[], source="empty")

        request = build_patterns_prompt(symptoms, medications, symptom_types, time_range_months)

        patterns: List[PatternRecord] = []
        try:
            items = extract_json_array(await self._call(request))
            coerced = coerce_patterns(items)
            unusable = [p.title for p in coerced if not p.is_renderable()]
            if unusable:
                logger.warning(
                    f"Dropped {len(unusable)} AI patterns that cannot be charted",
                    extra={"extra_fields": {"titles": unusable}}
                )
            patterns = [p for p in coerced if p.is_renderable()][:PATTERN_COUNT]
        except (TransportError, ExtractionError) as e:
            logger.warning(
                f"Pattern generation degraded to local analysis: {type(e).__name__}: {e}",
                extra={"extra_fields": {"reasons": getattr(e, "reasons", [])}}
            )

        if patterns:
            logger.info(f"Generated {len(patterns)} AI patterns from {len(symptoms)} entries")
            return GenerationResult[PatternRecord](success=True, data=patterns, source="ai")

        fallback = synthesize_patterns([summarize_symptom_for_patterns(s) for s in symptoms])
        return GenerationResult[PatternRecord](
            success=True, data=fallback, source="fallback", notice=PATTERNS_FALLBACK_NOTICE
        )
