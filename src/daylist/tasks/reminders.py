# src/daylist/tasks/reminders.py

"""
Reminder scheduler.

Per task there are two reminder states: NoReminder and ReminderAt(t).
The only transition is "set" (NoReminder -> ReminderAt, or ReminderAt -> ReminderAt with
a new time). There is no cancel: a reminder goes away only when the task is deleted
or the list is cleared.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime

from ..core.clock import as_local, local_now
from ..core.ports import Clock, NotificationPayload, Notifier
from ..errors import InvalidReminderTimeError
from .task_models import ReminderAt, TaskRecord
from .task_store import TaskStore

logger = logging.getLogger(__name__)

DEFAULT_REMINDER_TITLE = "Task reminder"


def reminder_delay_seconds(target: datetime, now: datetime) -> int:
    """Whole seconds from `now` until `target` (sub-second part is dropped)."""
    return math.floor((target - now).total_seconds())


def is_past_due(reminder_time: datetime | None, now: datetime | None = None) -> bool:
    """True iff a reminder time is set and already elapsed. Display-only; changes nothing."""
    if reminder_time is None:
        return False
    if now is None:
        now = local_now()
    return as_local(reminder_time) < as_local(now)


class ReminderScheduler:
    def __init__(
        self,
        store: TaskStore,
        notifier: Notifier,
        *,
        clock: Clock = local_now,
        title: str = DEFAULT_REMINDER_TITLE,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._clock = clock
        self._title = title

    def is_past_due(self, task: TaskRecord) -> bool:
        return is_past_due(task.reminder_time, self._clock())

    async def schedule_reminder(self, task_id: str, target: datetime) -> list[TaskRecord]:
        """
        Attach a one-shot reminder firing at `target`.

        Raises:
        - InvalidReminderTimeError if `target` is not strictly in the future
        - TaskNotFoundError if there is no such task
        - whatever the notifier raises (typically NotificationRequestError), unchanged

        On any failure the task keeps its previous reminder state.
        """
        target = as_local(target)
        if target <= self._clock():
            raise InvalidReminderTimeError()

        async def _request(task: TaskRecord) -> None:
            # Re-read the clock under the store lock: a slow save ahead of us eats into the delay.
            now = self._clock()
            if target <= now:
                raise InvalidReminderTimeError()
            delay = reminder_delay_seconds(target, now)
            request_id = await self._notifier.schedule_one_shot(delay, self._payload(task))
            logger.info("Reminder requested task=%s delay=%ss request=%s", task.id, delay, request_id)

        return await self._store.attach_reminder(task_id, ReminderAt(target), _request)

    async def rearm_pending(self) -> int:
        """
        Request notifications again for reminders still in the future.

        Notifier requests do not outlive the process, while the stored records keep
        their reminder. Call after load(). Past-due reminders are left alone; a refused
        request is logged and the others are still tried. Returns how many were re-armed.
        """
        now = self._clock()
        armed = 0
        for task in self._store.tasks:
            reminder_time = task.reminder_time
            if reminder_time is None or reminder_time <= now:
                continue
            try:
                await self._notifier.schedule_one_shot(reminder_delay_seconds(reminder_time, now), self._payload(task))
            except Exception:
                logger.exception("Failed to re-arm reminder task=%s", task.id)
                continue
            armed += 1
        if armed:
            logger.info("Re-armed %d reminders", armed)
        return armed

    def _payload(self, task: TaskRecord) -> NotificationPayload:
        return NotificationPayload(title=self._title, body=task.text)
