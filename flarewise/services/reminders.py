"""
Medication Reminders - Daily timers that fire a notification at each
reminder time of a medication.
"""

import asyncio
import inspect
import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from ..models.records import MedicationRecord

logger = logging.getLogger(__name__)

Notify = Callable[[str, str], Any]


def next_occurrence(time_str: str, now: Optional[datetime] = None) -> datetime:
    """
    Next datetime at HH:MM, today if still ahead, otherwise tomorrow.

    Raises:
        ValueError: If time_str is not HH:MM
    """
    now = now or datetime.now()
    hours, minutes = (int(part) for part in time_str.split(":"))
    scheduled = now.replace(hour=hours, minute=minutes, second=0, microsecond=0)
    if scheduled < now:
        scheduled += timedelta(days=1)
    return scheduled


def reminder_text(medication: MedicationRecord) -> tuple:
    """Title and body for a medication reminder."""
    return (
        f"Time to take {medication.name}",
        f"Take {medication.dosage} of {medication.name}",
    )


class ReminderScheduler:
    """
    Keeps one asyncio task per (medication, time) pair. Each task sleeps until
    the next occurrence, calls notify(title, body), and loops for the next day.
    """

    def __init__(self, notify: Notify, clock: Callable[[], datetime] = datetime.now):
        """
        Args:
            notify: Called with (title, body); may be sync or async
            clock: Source of the current time
        """
        self.notify = notify
        self.clock = clock
        self._tasks: Dict[str, Dict[str, asyncio.Task]] = {}

    async def _run(self, medication: MedicationRecord, time_str: str):
        title, body = reminder_text(medication)
        while True:
            now = self.clock()
            delay = (next_occurrence(time_str, now) - now).total_seconds()
            await asyncio.sleep(delay)
            logger.info(
                f"Medication reminder fired: {medication.name} at {time_str}",
                extra={"extra_fields": {"medication_id": medication.id, "time": time_str}},
            )
            try:
                result = self.notify(title, body)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Reminder notification failed for {medication.id}: {e}", exc_info=True)
            # Step past the minute that just fired
            await asyncio.sleep(1)

    def schedule(self, medication: MedicationRecord):
        """Start timers for every reminder time, replacing existing ones."""
        self.cancel(medication.id)
        tasks = {
            time_str: asyncio.create_task(self._run(medication, time_str))
            for time_str in medication.times
        }
        if tasks:
            self._tasks[medication.id] = tasks
            logger.debug(f"Scheduled {len(tasks)} reminder(s) for medication {medication.id}")

    def cancel(self, medication_id: str) -> bool:
        """Cancel all timers for a medication. Returns True if any existed."""
        tasks = self._tasks.pop(medication_id, None)
        if not tasks:
            return False
        for task in tasks.values():
            task.cancel()
        logger.debug(f"Cancelled reminders for medication {medication_id}")
        return True

    def sync(self, medication: MedicationRecord):
        """Schedule or cancel according to the medication's reminder flag."""
        if medication.reminder_enabled and medication.times:
            self.schedule(medication)
        else:
            self.cancel(medication.id)

    def scheduled_ids(self) -> List[str]:
        return sorted(self._tasks)

    def scheduled_times(self, medication_id: str) -> List[str]:
        return sorted(self._tasks.get(medication_id, {}))

    async def shutdown(self):
        """Cancel every timer and wait for the tasks to finish."""
        tasks = [task for group in self._tasks.values() for task in group.values()]
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
