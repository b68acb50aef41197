# src/daylist/tasks/daily_reset.py

from __future__ import annotations

"""
Daily reset timer.

An explicit loop:
- work out the next local midnight from the current clock,
- sleep until the local date reaches it,
- clear the task list,
- repeat.

Nothing is stored between runs: after a restart the next midnight is computed again
from the clock. To stop the timer, cancel the coroutine/task.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, time, timedelta
from typing import Protocol

from ..core.clock import local_now
from ..core.ports import Clock

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

DEFAULT_RECHECK_SECONDS = 3600.0


class Clearable(Protocol):
    def clear_all(self) -> Awaitable[object]: ...


def next_local_midnight(now: datetime) -> datetime:
    """00:00 of the calendar day after `now`, in `now`'s timezone."""
    return datetime.combine(now.date() + timedelta(days=1), time.min, tzinfo=now.tzinfo)


async def run_daily_reset(
        store: Clearable,
        *,
        clock: Clock = local_now,
        sleep: Sleep = asyncio.sleep,
        recheck_seconds: float = DEFAULT_RECHECK_SECONDS,
) -> None:
    """
    Clear `store` once per local day boundary, forever.

    Sleeps in chunks of at most `recheck_seconds` and re-reads the wall clock after
    each one: the UTC offset can change (DST) and the monotonic clock stops while the
    machine is suspended. The reset fires only once the local date has changed.

    A failing clear is logged; the timer still re-arms for the next midnight.
    """
    recheck_s = max(1.0, float(recheck_seconds))

    while True:
        start = clock()
        target_day = start.date() + timedelta(days=1)
        logger.info("Daily reset armed for %s", next_local_midnight(start).isoformat())

        while True:
            now = clock()
            if now.date() >= target_day:
                break
            remaining = next_local_midnight(now).timestamp() - now.timestamp()
            await sleep(min(max(remaining, 0.01), recheck_s))

        try:
            await store.clear_all()
            logger.info("Daily reset done for %s", target_day.isoformat())
        except Exception:
            logger.exception("Daily reset failed for %s; next attempt at the following midnight", target_day)
