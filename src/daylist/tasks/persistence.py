# src/daylist/tasks/persistence.py

"""
Persistence gateway.

The whole task list is stored as one JSON array under one key:

    [{"id": "...", "text": "...", "completed": false,
      "notificationSet": true, "reminderTime": "2024-05-01T18:30:00+02:00"}, ...]

The list is always written whole, never patched. Older blobs used "task" instead of
"text"; both are accepted when reading.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from ..core.clock import as_local
from ..core.ports import KeyValueStore
from ..errors import PersistenceError
from .task_models import NO_REMINDER, Reminder, ReminderAt, TaskRecord

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "tasks"


def task_to_dict(task: TaskRecord) -> dict[str, Any]:
    reminder_time = task.reminder_time
    return {
        "id": task.id,
        "text": task.text,
        "completed": task.completed,
        "notificationSet": task.notification_set,
        "reminderTime": reminder_time.isoformat() if reminder_time is not None else None,
    }


def _parse_timestamp(raw: Any) -> datetime:
    if not isinstance(raw, str) or not raw.strip():
        raise PersistenceError(f"reminderTime must be an ISO-8601 string, got {raw!r}")
    try:
        ts = datetime.fromisoformat(raw.strip())
    except ValueError as exc:
        raise PersistenceError(f"Bad reminderTime {raw!r}") from exc
    return as_local(ts)


def _flag(item: dict[str, Any], name: str) -> bool:
    val = item.get(name, False)
    if val is None:
        return False
    if not isinstance(val, bool):
        raise PersistenceError(f"{name} must be a boolean, got {val!r}")
    return val


def task_from_dict(item: Any) -> TaskRecord:
    if not isinstance(item, dict):
        raise PersistenceError(f"Task entry must be an object, got {type(item).__name__}")

    task_id = item.get("id")
    if not isinstance(task_id, str) or not task_id:
        raise PersistenceError(f"Task entry has no valid id: {item!r}")

    text = item.get("text", item.get("task"))
    if not isinstance(text, str) or not text.strip():
        raise PersistenceError(f"Task {task_id} has empty text")

    reminder: Reminder = NO_REMINDER
    if _flag(item, "notificationSet"):
        reminder = ReminderAt(_parse_timestamp(item.get("reminderTime")))

    return TaskRecord(
        id=task_id,
        text=text.strip(),
        completed=_flag(item, "completed"),
        reminder=reminder,
    )


def encode_tasks(tasks: Iterable[TaskRecord]) -> str:
    return json.dumps([task_to_dict(t) for t in tasks], ensure_ascii=False)


def decode_tasks(blob: str) -> list[TaskRecord]:
    """
    Decode a stored blob. Any structural problem makes the whole blob invalid
    (PersistenceError); duplicate ids keep the first occurrence.
    """
    try:
        data = json.loads(blob)
    except ValueError as exc:
        raise PersistenceError("Stored task list is not valid JSON") from exc

    if not isinstance(data, list):
        raise PersistenceError(f"Stored task list must be a JSON array, got {type(data).__name__}")

    out: list[TaskRecord] = []
    seen: set[str] = set()
    for item in data:
        task = task_from_dict(item)
        if task.id in seen:
            logger.warning("Duplicate task id %s in stored list; keeping the first one", task.id)
            continue
        seen.add(task.id)
        out.append(task)
    return out


class TaskGateway:
    """
    Load/save the whole task collection through a KeyValueStore.

    Backend calls are blocking, so they run in a worker thread.
    Backend failures are wrapped into PersistenceError with the cause chained.
    """

    def __init__(self, kv: KeyValueStore, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._kv = kv
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    async def load(self) -> list[TaskRecord] | None:
        """Return the stored tasks, or None if nothing was ever saved."""
        try:
            blob = await asyncio.to_thread(self._kv.get, self._key)
        except Exception as exc:
            raise PersistenceError(f"Failed to read key {self._key!r}") from exc

        if blob is None:
            return None
        return decode_tasks(blob)

    async def save(self, tasks: Iterable[TaskRecord]) -> None:
        blob = encode_tasks(tasks)
        try:
            await asyncio.to_thread(self._kv.set, self._key, blob)
        except Exception as exc:
            raise PersistenceError(f"Failed to write key {self._key!r}") from exc
