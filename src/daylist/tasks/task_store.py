# src/daylist/tasks/task_store.py

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any

from ..errors import PersistenceError, TaskNotFoundError, ValidationError
from .ordering import sort_tasks
from .persistence import TaskGateway
from .task_models import ReminderAt, TaskRecord

logger = logging.getLogger(__name__)

ReminderRequest = Callable[[TaskRecord], Awaitable[Any]]


def _clean_text(text: str) -> str:
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationError("Please enter a task")
    return cleaned


class TaskStore:
    """
    Single owner of the task list.

    Every mutation:
    - runs under one asyncio.Lock (user commands and the midnight reset never interleave),
    - re-sorts the list with the ordering policy,
    - writes the whole list through the gateway exactly once.

    If the write fails the in-memory change is kept and PersistenceError is raised,
    so the caller can warn that the change may not survive a restart.
    """

    def __init__(self, gateway: TaskGateway, *, id_clock: Callable[[], float] = time.time) -> None:
        self._gateway = gateway
        self._id_clock = id_clock
        self._tasks: list[TaskRecord] = []
        self._lock = asyncio.Lock()
        self._last_id_ms = 0
        self.last_load_error: PersistenceError | None = None

    # ---- read side ----

    @property
    def tasks(self) -> tuple[TaskRecord, ...]:
        return tuple(self._tasks)

    def get(self, task_id: str) -> TaskRecord | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def __len__(self) -> int:
        return len(self._tasks)

    # ---- low-level helpers ----

    def _new_task_id(self) -> str:
        existing = {t.id for t in self._tasks}
        candidate = max(int(self._id_clock() * 1000), self._last_id_ms + 1)
        while str(candidate) in existing:
            candidate += 1
        self._last_id_ms = candidate
        return str(candidate)

    async def _commit(self, tasks: list[TaskRecord]) -> list[TaskRecord]:
        self._tasks = sort_tasks(tasks)
        try:
            await self._gateway.save(self._tasks)
        except PersistenceError:
            logger.exception("Failed to save %d tasks; keeping in-memory state", len(self._tasks))
            raise
        return list(self._tasks)

    def _map(self, task_id: str, fn: Callable[[TaskRecord], TaskRecord]) -> list[TaskRecord]:
        return [fn(t) if t.id == task_id else t for t in self._tasks]

    # ---- public API ----

    async def load(self) -> list[TaskRecord]:
        """
        Replace the in-memory list with the stored one.

        A missing blob means an empty list. A broken blob or unreadable backend is
        logged and also yields an empty list; the error is kept in `last_load_error`.
        """
        async with self._lock:
            self.last_load_error = None
            try:
                stored = await self._gateway.load()
            except PersistenceError as exc:
                logger.warning("Failed to load tasks, starting with an empty list: %s", exc)
                self.last_load_error = exc
                stored = None

            self._tasks = sort_tasks(stored or [])
            logger.info("Loaded %d tasks", len(self._tasks))
            return list(self._tasks)

    async def add(self, text: str) -> list[TaskRecord]:
        cleaned = _clean_text(text)
        async with self._lock:
            task = TaskRecord(id=self._new_task_id(), text=cleaned)
            logger.debug("Task added id=%s", task.id)
            return await self._commit([task, *self._tasks])

    async def delete(self, task_id: str) -> list[TaskRecord]:
        async with self._lock:
            return await self._commit([t for t in self._tasks if t.id != task_id])

    async def edit(self, task_id: str, new_text: str) -> list[TaskRecord]:
        cleaned = _clean_text(new_text)
        async with self._lock:
            return await self._commit(self._map(task_id, lambda t: replace(t, text=cleaned)))

    async def toggle_complete(self, task_id: str) -> list[TaskRecord]:
        async with self._lock:
            return await self._commit(self._map(task_id, lambda t: replace(t, completed=not t.completed)))

    async def clear_all(self) -> list[TaskRecord]:
        async with self._lock:
            logger.info("Clearing %d tasks", len(self._tasks))
            return await self._commit([])

    async def attach_reminder(
        self,
        task_id: str,
        reminder: ReminderAt,
        request: ReminderRequest,
    ) -> list[TaskRecord]:
        """
        Record a reminder after `request(task)` succeeds.

        The request runs under the store lock so the task cannot be deleted or
        cleared between the notifier accepting it and the reminder being recorded.
        If `request` raises, nothing changes and the exception propagates as is.
        """
        async with self._lock:
            task = self.get(task_id)
            if task is None:
                raise TaskNotFoundError(task_id)

            await request(task)
            return await self._commit(self._map(task_id, lambda t: replace(t, reminder=reminder)))
