"""
Unit tests for data gates and the stale-result guard.
"""

import asyncio

import pytest

from flarewise.insights.errors import InsufficientDataError, RequestInProgressError
from flarewise.insights.session import (
    MIN_INSIGHT_ENTRIES, MIN_PATTERN_ENTRIES, ResultHolder, ensure_enough_data, run_guarded,
)


class TestGates:

    def test_enough_data_passes(self):
        ensure_enough_data(5, MIN_INSIGHT_ENTRIES, "generate insights")

    def test_insufficient_data_message(self):
        with pytest.raises(InsufficientDataError) as exc_info:
            ensure_enough_data(9, MIN_PATTERN_ENTRIES, "generate pattern visualizations")
        error = exc_info.value
        assert error.count == 9
        assert error.minimum == 10
        assert str(error) == (
            "At least 10 symptom entries are needed to generate pattern visualizations. You have 9."
        )


class TestResultHolder:

    def test_complete_stores_current_result(self):
        holder = ResultHolder()
        token = holder.begin("inputs-a")
        assert holder.is_loading
        assert holder.complete(token, "inputs-a", ["r"])
        assert holder.result == ["r"]
        assert not holder.is_loading

    def test_second_request_refused_while_loading(self):
        holder = ResultHolder()
        holder.begin("a")
        with pytest.raises(RequestInProgressError):
            holder.begin("a")

    def test_stale_result_discarded(self):
        holder = ResultHolder()
        token = holder.begin("a")
        holder.invalidate("b")
        assert not holder.is_loading
        assert not holder.complete(token, "a", ["late"])
        assert holder.result is None

    def test_older_token_discarded_after_new_request(self):
        holder = ResultHolder()
        old = holder.begin("a")
        holder.invalidate("a")
        new = holder.begin("a")
        assert not holder.complete(old, "a", ["old"])
        assert holder.complete(new, "a", ["new"])
        assert holder.result == ["new"]

    def test_fail_releases_slot(self):
        holder = ResultHolder()
        token = holder.begin("a")
        holder.fail(token)
        assert not holder.is_loading
        holder.begin("a")


class TestRunGuarded:

    @pytest.mark.asyncio
    async def test_returns_result(self):
        holder = ResultHolder()

        async def action():
            return ["done"]

        assert await run_guarded(holder, "k", action) == ["done"]

    @pytest.mark.asyncio
    async def test_late_result_keeps_previous(self):
        holder = ResultHolder()
        holder.result = ["previous"]
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow():
            started.set()
            await release.wait()
            return ["late"]

        task = asyncio.create_task(run_guarded(holder, "old-inputs", slow))
        await started.wait()
        holder.invalidate("new-inputs")
        release.set()
        assert await task == ["previous"]

    @pytest.mark.asyncio
    async def test_exception_releases_and_propagates(self):
        holder = ResultHolder()

        async def boom():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await run_guarded(holder, "k", boom)
        assert not holder.is_loading
