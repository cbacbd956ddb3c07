"""
Response Extractor - Recovers a JSON array from free-form model output.

Model responses often wrap the array in markdown fences or surround it with
commentary. Extraction runs an ordered cascade of pure strategies and stops
at the first one whose candidate parses as a JSON array. Only syntax is
checked here; field-level validation happens in ``validation``.
"""

import json
import logging
import re
from typing import Any, Callable, List, Tuple

from .errors import ExtractionError

logger = logging.getLogger(__name__)

Strategy = Callable[[str], List[Any]]

_GREEDY_ARRAY_RE = re.compile(r"\[[\s\S]*\]")
_FENCED_BLOCK_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


def _load_array(candidate: str) -> List[Any]:
    """Parse a candidate string, requiring a top-level array."""
    try:
        value = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"invalid JSON: {e.msg} at position {e.pos}") from e
    if not isinstance(value, list):
        raise ExtractionError(f"parsed a {type(value).__name__}, not an array")
    return value


def parse_direct(text: str) -> List[Any]:
    """Parse the whole trimmed response."""
    return _load_array(text.strip())


def parse_greedy_brackets(text: str) -> List[Any]:
    """Parse from the first '[' through the last ']' found by a greedy match."""
    match = _GREEDY_ARRAY_RE.search(text)
    if not match:
        raise ExtractionError("no bracketed span")
    return _load_array(match.group(0))


def parse_fenced_block(text: str) -> List[Any]:
    """Parse the contents of the first ``` fence, optionally labelled json."""
    match = _FENCED_BLOCK_RE.search(text)
    if not match:
        raise ExtractionError("no fenced code block")
    return _load_array(match.group(1))


def parse_bracket_scan(text: str) -> List[Any]:
    """Parse between the first '[' and the last ']' located by index."""
    first = text.find("[")
    last = text.rfind("]")
    if first == -1 or last == -1 or last <= first:
        raise ExtractionError("no '[' ... ']' pair")
    return _load_array(text[first:last + 1])


STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("direct", parse_direct),
    ("greedy_brackets", parse_greedy_brackets),
    ("fenced_block", parse_fenced_block),
    ("bracket_scan", parse_bracket_scan),
)


def extract_json_array(
    text: str,
    strategies: Tuple[Tuple[str, Strategy], ...] = STRATEGIES,
) -> List[Any]:
    """
    Recover a JSON array from model output.

    Args:
        text: Raw text returned by the generation service
        strategies: Ordered (name, strategy) pairs to try

    Returns:
        The parsed array. An empty array is a valid result.

    Raises:
        ExtractionError: if no strategy produced an array
    """
    reasons: List[str] = []
    for name, strategy in strategies:
        try:
            result = strategy(text)
        except ExtractionError as e:
            reasons.append(f"{name}: {e}")
            continue
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Extracted array of {len(result)} items with strategy '{name}'")
        return result

    raise ExtractionError("Could not extract a JSON array from the model response", reasons)
