# src/daylist/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class NoReminder:
    """Task has no reminder attached."""


@dataclass(slots=True, frozen=True)
class ReminderAt:
    """A one-shot reminder accepted by the notifier for the given instant."""

    at: datetime


Reminder = NoReminder | ReminderAt

NO_REMINDER = NoReminder()


@dataclass(slots=True, frozen=True)
class TaskRecord:
    """
    One item of the task list.

    Notes:
    - `id` is opaque and never changes once assigned.
    - The reminder is a tagged variant, so "notification set" and "reminder time"
      can never disagree. The legacy flag/timestamp pair is exposed as properties
      for serialization and display.
    """

    id: str
    text: str
    completed: bool = False
    reminder: Reminder = NO_REMINDER

    @property
    def notification_set(self) -> bool:
        return isinstance(self.reminder, ReminderAt)

    @property
    def reminder_time(self) -> datetime | None:
        if isinstance(self.reminder, ReminderAt):
            return self.reminder.at
        return None
