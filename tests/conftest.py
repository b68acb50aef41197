# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

from daylist.core.state import AppState
from daylist.notifications.local_notifier import LocalNotifier
from daylist.tasks.persistence import TaskGateway
from daylist.tasks.reminders import ReminderScheduler
from daylist.tasks.task_store import TaskStore

from .fakes import FakeClock, FakeKeyValueStore, FakeNotifier

# A fixed "now" for deterministic tests: 2024-05-01 10:00 UTC.
NOW = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture()
def kv() -> FakeKeyValueStore:
    return FakeKeyValueStore()


@pytest.fixture()
def gateway(kv: FakeKeyValueStore) -> TaskGateway:
    return TaskGateway(kv, key="tasks")


@pytest.fixture()
def store(gateway: TaskGateway) -> TaskStore:
    return TaskStore(gateway)


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def reminders(store: TaskStore, notifier: FakeNotifier, clock: FakeClock) -> ReminderScheduler:
    return ReminderScheduler(store, notifier, clock=clock, title="Task reminder")


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="daylist",
        log_level="WARNING",
        data_dir=tmp_path / "data",
        store_db_path=tmp_path / "data" / "tasks.sqlite3",
        storage_key="tasks",
        timezone="",
        reminder_title="Task reminder",
        daily_reset_enabled=False,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, notifier: FakeNotifier, clock: FakeClock) -> AppState:
    """
    AppState wired with deterministic fakes (in-memory storage, fake clock).
    """
    return AppState(
        settings=settings,
        clock=clock,
        store=store,
        reminders=ReminderScheduler(store, notifier, clock=clock),
        notifier=LocalNotifier(),
    )
