# src/daylist/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_task_list
from ..core.ports import NotificationPayload
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def _print_reminder(payload: NotificationPayload) -> None:
    # Called from the event loop while input() may be waiting; start on a fresh line.
    print(f"\n[{_ts_local()}] *** {payload.title}: {payload.body}", flush=True)


async def _read_line(prompt: str) -> str:
    """
    Run input() in a daemon thread and await its result.

    A cancelled read leaves the thread blocked in input(); being a daemon, it does not
    keep the interpreter alive at exit the way an executor worker would.
    """
    loop = asyncio.get_running_loop()
    fut: asyncio.Future[str] = loop.create_future()

    def _settle(line: str | None, exc: Exception | None) -> None:
        if fut.done():
            return
        if exc is not None:
            fut.set_exception(exc)
        else:
            fut.set_result(line or "")

    def _worker() -> None:
        try:
            line, exc = input(prompt), None
        except Exception as e:
            line, exc = None, e
        # The loop may already be closed if the app exited while we were blocked.
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(_settle, line, exc)

    threading.Thread(target=_worker, name="console-input", daemon=True).start()
    return await fut


async def run_console_loop(state: AppState) -> None:
    """
    Interactive REPL over the task store.

    input() blocks, so it runs in a daemon thread; the event loop stays free for
    reminders and the midnight reset.
    """
    logger.info("Console connector started.")
    state.notifier.set_deliver(_print_reminder)

    if state.store.last_load_error is not None:
        _print_ts("[WARN] Saved tasks could not be read; starting with an empty list.")

    print(render_task_list(state))
    _print_ts("Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = (await _read_line("> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = await command_registry.handle(state, user_input)
            if reply is None:
                reply = await command_registry.handle_text(state, user_input)
        except Exception:
            logger.exception("Console command handler crashed.")
            reply = "Internal error while handling the command."

        print(reply, flush=True)

    logger.info("Console connector finished.")
