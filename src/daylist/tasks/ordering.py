# src/daylist/tasks/ordering.py

"""
Ordering policy for the task list.

Three tiers, applied in order:
1. tasks with a reminder come before tasks without one;
2. reminders are ordered by time, earliest first;
3. tasks without a reminder are ordered incomplete-before-completed.

Completion is ignored among reminder tasks. Equal keys keep their relative order
(sorted() is stable), which is what keeps "newest first" for fresh tasks.
"""

from __future__ import annotations

from collections.abc import Iterable

from .task_models import ReminderAt, TaskRecord

SortKey = tuple[int, float, bool]


def task_sort_key(task: TaskRecord) -> SortKey:
    reminder = task.reminder
    if isinstance(reminder, ReminderAt):
        return (0, reminder.at.timestamp(), False)
    return (1, 0.0, task.completed)


def sort_tasks(tasks: Iterable[TaskRecord]) -> list[TaskRecord]:
    """Return a new list in display order; the input is not modified."""
    return sorted(tasks, key=task_sort_key)
