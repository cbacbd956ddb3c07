"""
Tests for medication reminder scheduling.
"""

import asyncio
from datetime import date, datetime

import pytest
from unittest.mock import MagicMock, patch

from conftest import make_medication
from flarewise.services.reminders import ReminderScheduler, next_occurrence, reminder_text


class TestNextOccurrence:

    def test_later_today(self):
        now = datetime(2024, 3, 4, 7, 30)
        assert next_occurrence("08:00", now) == datetime(2024, 3, 4, 8, 0)

    def test_already_passed_is_tomorrow(self):
        now = datetime(2024, 3, 4, 21, 15)
        assert next_occurrence("08:00", now) == datetime(2024, 3, 5, 8, 0)

    def test_month_rollover(self):
        now = datetime(2024, 2, 29, 23, 0)
        assert next_occurrence("06:45", now) == datetime(2024, 3, 1, 6, 45)


class TestReminderScheduler:

    def test_reminder_text(self):
        title, body = reminder_text(make_medication("Prednisone", dosage="5mg"))
        assert title == "Time to take Prednisone"
        assert body == "Take 5mg of Prednisone"

    @pytest.mark.asyncio
    async def test_sync_schedules_and_cancels(self):
        scheduler = ReminderScheduler(MagicMock())
        med = make_medication(times=["08:00", "20:00"], reminder_enabled=True)

        scheduler.sync(med)
        assert scheduler.scheduled_ids() == [med.id]
        assert scheduler.scheduled_times(med.id) == ["08:00", "20:00"]

        scheduler.sync(med.model_copy(update={"reminder_enabled": False}))
        assert scheduler.scheduled_ids() == []
        await asyncio.sleep(0)
        await scheduler.shutdown()

    @pytest.mark.asyncio
    async def test_cancel_unknown(self):
        assert not ReminderScheduler(MagicMock()).cancel("missing")

    @pytest.mark.asyncio
    async def test_fires_and_reschedules(self):
        notify = MagicMock()
        scheduler = ReminderScheduler(notify, clock=lambda: datetime(2024, 3, 4, 7, 59, 59))
        med = make_medication("Prednisone", dosage="5mg", start=date(2024, 1, 1),
                              times=["08:00"], reminder_enabled=True)

        real_sleep = asyncio.sleep
        delays = []

        async def fake_sleep(delay):
            delays.append(delay)
            if len(delays) >= 4:
                await real_sleep(3600)
            await real_sleep(0)

        with patch("flarewise.services.reminders.asyncio.sleep", fake_sleep):
            scheduler.schedule(med)
            for _ in range(10):
                await real_sleep(0)
            await scheduler.shutdown()

        assert delays[0] == 1.0
        notify.assert_called_with("Time to take Prednisone", "Take 5mg of Prednisone")
        assert notify.call_count >= 1

    @pytest.mark.asyncio
    async def test_async_notify_is_awaited(self):
        received = []

        async def notify(title, body):
            received.append(title)

        scheduler = ReminderScheduler(notify, clock=lambda: datetime(2024, 3, 4, 8, 0))
        med = make_medication("Folic acid", times=["08:00"], reminder_enabled=True)

        real_sleep = asyncio.sleep

        async def fake_sleep(delay):
            if received:
                await real_sleep(3600)

        with patch("flarewise.services.reminders.asyncio.sleep", fake_sleep):
            scheduler.schedule(med)
            for _ in range(5):
                await real_sleep(0)
            await scheduler.shutdown()

        assert received == ["Time to take Folic acid"]
