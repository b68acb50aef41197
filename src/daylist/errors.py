# src/daylist/errors.py

"""
Error taxonomy.

None of these are fatal for the app: connectors report them to the user and keep running.
"""

from __future__ import annotations


class DaylistError(Exception):
    """Base class for all domain errors."""


class ValidationError(DaylistError, ValueError):
    """Task text is empty after trimming."""


class InvalidReminderTimeError(DaylistError, ValueError):
    """Reminder target time is not strictly in the future."""

    def __init__(self, message: str = "Selected time must be in the future") -> None:
        super().__init__(message)


class PersistenceError(DaylistError):
    """Reading, writing or decoding the stored task list failed."""


class NotificationRequestError(DaylistError):
    """The notification backend refused to schedule a reminder."""


class TaskNotFoundError(DaylistError, LookupError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"No task with id {task_id!r}")
        self.task_id = task_id
