# src/daylist/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads the saved list and re-arms its future
reminders, then runs on one event loop:
- the midnight reset loop as a background task (optional),
- the console REPL until /exit or EOF.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.daily_reset import run_daily_reset

logger = logging.getLogger(__name__)


async def run_app(state: AppState) -> None:
    await state.store.load()
    await state.reminders.rearm_pending()

    reset_task: asyncio.Task[None] | None = None
    if state.settings.daily_reset_enabled:
        reset_task = asyncio.create_task(run_daily_reset(state.store, clock=state.clock), name="daily-reset")

    try:
        await run_console_loop(state)
    finally:
        if reset_task is not None:
            reset_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await reset_task
        state.notifier.cancel_all()


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    try:
        asyncio.run(run_app(state))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
