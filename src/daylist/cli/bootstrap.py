# src/daylist/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (storage/store/notifier/reminders).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.clock import make_clock
from ..core.state import AppState
from ..notifications.local_notifier import LocalNotifier
from ..storage.kv_store import SqliteKeyValueStore
from ..tasks.persistence import TaskGateway
from ..tasks.reminders import ReminderScheduler
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    The store is created empty; call `await state.store.load()` before use.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    clock = make_clock(settings.timezone)
    gateway = TaskGateway(SqliteKeyValueStore(settings.store_db_path), key=settings.storage_key)
    store = TaskStore(gateway)
    notifier = LocalNotifier()

    state = AppState(
        settings=settings,
        clock=clock,
        store=store,
        reminders=ReminderScheduler(store, notifier, clock=clock, title=settings.reminder_title),
        notifier=notifier,
    )
    logger.debug("State created db=%s key=%s", settings.store_db_path, settings.storage_key)
    return state
