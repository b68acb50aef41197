# tests/test_bootstrap.py

from __future__ import annotations

import asyncio
import threading
from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from daylist.cli.bootstrap import create_initial_state
from daylist.cli.main import run_app


@pytest.mark.asyncio
async def test_state_persists_to_configured_db(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)
    await state.store.load()
    await state.store.add("survives restart")

    assert settings.store_db_path.exists()

    again = create_initial_state(settings=settings)
    tasks = await again.store.load()
    assert [t.text for t in tasks] == ["survives restart"]


@pytest.mark.asyncio
async def test_run_app_exits_on_eof(settings: SimpleNamespace, monkeypatch: pytest.MonkeyPatch) -> None:
    settings.daily_reset_enabled = True
    state = create_initial_state(settings=settings)
    inputs = iter(["Buy  oat milk", "/done 1"])

    def fake_input(prompt: str = "") -> str:
        try:
            return next(inputs)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)

    await run_app(state)

    assert [(t.text, t.completed) for t in state.store.tasks] == [("Buy  oat milk", True)]
    assert state.notifier.pending_count() == 0


@pytest.mark.asyncio
async def test_run_app_rearms_saved_reminders(settings: SimpleNamespace, monkeypatch: pytest.MonkeyPatch) -> None:
    first = create_initial_state(settings=settings)
    await first.store.load()
    (task,) = await first.store.add("stand up")
    await first.reminders.schedule_reminder(task.id, datetime.now().astimezone() + timedelta(hours=2))
    first.notifier.cancel_all()

    state = create_initial_state(settings=settings)
    pending_at_prompt: list[int] = []

    def fake_input(prompt: str = "") -> str:
        pending_at_prompt.append(state.notifier.pending_count())
        raise EOFError

    monkeypatch.setattr("builtins.input", fake_input)

    await run_app(state)

    assert pending_at_prompt == [1]
    assert state.store.tasks[0].notification_set is True
    assert state.notifier.pending_count() == 0


@pytest.mark.asyncio
async def test_cancel_while_waiting_for_input_shuts_down(
    settings: SimpleNamespace, monkeypatch: pytest.MonkeyPatch
) -> None:
    state = create_initial_state(settings=settings)
    release = threading.Event()
    readers: list[threading.Thread] = []

    def blocking_input(prompt: str = "") -> str:
        readers.append(threading.current_thread())
        release.wait(timeout=5)
        raise EOFError

    monkeypatch.setattr("builtins.input", blocking_input)

    app = asyncio.create_task(run_app(state))
    try:
        for _ in range(200):
            if readers:
                break
            await asyncio.sleep(0.01)
        assert readers, "console never asked for input"

        app.cancel()
        with pytest.raises(asyncio.CancelledError):
            await asyncio.wait_for(app, timeout=1.0)

        assert readers[0].daemon is True
        assert readers[0].is_alive()
        assert state.notifier.pending_count() == 0
    finally:
        release.set()
