"""
Caller-side gating and result holding for generate actions.

These helpers are for clients that hold results, such as a UI view; the
HTTP API itself is stateless and only applies the entry gates. A view owns
one ResultHolder. It refuses a second request while one is in
flight, and it discards a late result when the view's inputs have changed
since the request started.
"""

import logging
from typing import Any, Awaitable, Callable, Generic, Hashable, Optional, TypeVar

from .errors import InsufficientDataError, RequestInProgressError

logger = logging.getLogger(__name__)

MIN_INSIGHT_ENTRIES = 5
MIN_PATTERN_ENTRIES = 10

T = TypeVar("T")


def ensure_enough_data(count: int, minimum: int, feature: str) -> None:
    """
    Raise InsufficientDataError when fewer than `minimum` entries exist.

    Args:
        count: Number of symptom entries available
        minimum: Entries required
        feature: What the entries are for, e.g. "generate insights"
    """
    if count < minimum:
        raise InsufficientDataError(
            f"At least {minimum} symptom entries are needed to {feature}. "
            f"You have {count}.",
            count=count,
            minimum=minimum,
        )


class ResultHolder(Generic[T]):
    """Latest-result slot for one client-side view."""

    def __init__(self):
        self._token = 0
        self._in_flight: Optional[int] = None
        self._inputs_key: Optional[Hashable] = None
        self.result: Optional[T] = None

    @property
    def is_loading(self) -> bool:
        return self._in_flight is not None

    def begin(self, inputs_key: Hashable) -> int:
        """
        Start a request for the given inputs.

        Returns:
            Token to pass to complete()

        Raises:
            RequestInProgressError: if a request is already running
        """
        if self._in_flight is not None:
            raise RequestInProgressError("A generate request is already in progress")
        self._token += 1
        self._in_flight = self._token
        self._inputs_key = inputs_key
        return self._token

    def invalidate(self, inputs_key: Hashable) -> None:
        """Record that the view's inputs changed; any running request becomes stale."""
        self._inputs_key = inputs_key
        self._in_flight = None

    def fail(self, token: int) -> None:
        """Release the in-flight slot after a request raised."""
        if self._in_flight == token:
            self._in_flight = None

    def complete(self, token: int, inputs_key: Hashable, result: T) -> bool:
        """
        Store a result if it is still current.

        Returns:
            True when the result was stored, False when it was stale
        """
        if token != self._token or inputs_key != self._inputs_key:
            logger.debug(f"Discarding stale result for token {token}")
            if self._in_flight == token:
                self._in_flight = None
            return False
        self._in_flight = None
        self.result = result
        return True


async def run_guarded(
    holder: ResultHolder[T],
    inputs_key: Hashable,
    action: Callable[[], Awaitable[T]],
) -> Any:
    """
    Run one generate action through a holder.

    Returns:
        The stored result, or the holder's previous result if this one was stale
    """
    token = holder.begin(inputs_key)
    try:
        result = await action()
    except Exception:
        holder.fail(token)
        raise
    holder.complete(token, inputs_key, result)
    return holder.result
