# src/daylist/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..notifications.local_notifier import LocalNotifier
from ..tasks.reminders import ReminderScheduler
from ..tasks.task_store import TaskStore
from .ports import Clock


@dataclass
class AppState:
    # Settings are kept on the state so connectors and commands can read them.
    settings: Any

    clock: Clock
    store: TaskStore
    reminders: ReminderScheduler
    notifier: LocalNotifier
