# tests/test_daily_reset.py

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from daylist.tasks.daily_reset import next_local_midnight, run_daily_reset
from daylist.tasks.task_store import TaskStore

from .fakes import FakeClock

BERLIN = ZoneInfo("Europe/Berlin")


class RecordingTarget:
    """Clearable fake: records the clock at each clear, optionally failing."""

    def __init__(self, clock: FakeClock, fail_first: bool = False) -> None:
        self.clock = clock
        self.fail_first = fail_first
        self.cleared_at: list[datetime] = []

    async def clear_all(self) -> list:
        self.cleared_at.append(self.clock())
        if self.fail_first and len(self.cleared_at) == 1:
            raise OSError("disk full")
        return []


def _sleeper(clock: FakeClock, *, stop_after_clears: int, target: RecordingTarget):
    """Fake sleep: advances the fake clock; cancels the loop once enough resets happened."""

    async def _sleep(seconds: float) -> None:
        if len(target.cleared_at) >= stop_after_clears:
            raise asyncio.CancelledError
        clock.advance(seconds)

    return _sleep


def test_next_local_midnight_is_start_of_next_day() -> None:
    now = datetime(2024, 5, 1, 23, 59, 59, tzinfo=BERLIN)
    assert next_local_midnight(now) == datetime(2024, 5, 2, 0, 0, tzinfo=BERLIN)


def test_next_local_midnight_at_exact_midnight_is_strictly_after() -> None:
    now = datetime(2024, 5, 2, 0, 0, tzinfo=BERLIN)
    assert next_local_midnight(now) == datetime(2024, 5, 3, 0, 0, tzinfo=BERLIN)


def test_next_local_midnight_across_month_and_year() -> None:
    assert next_local_midnight(datetime(2024, 12, 31, 8, 0, tzinfo=BERLIN)) == datetime(
        2025, 1, 1, tzinfo=BERLIN
    )


def test_next_local_midnight_on_dst_day_is_23_hours_away() -> None:
    # Europe/Berlin springs forward on 2024-03-31.
    now = datetime(2024, 3, 31, 0, 0, tzinfo=BERLIN)
    assert next_local_midnight(now).timestamp() - now.timestamp() == timedelta(hours=23).total_seconds()


@pytest.mark.asyncio
async def test_fires_at_each_midnight_once() -> None:
    clock = FakeClock(datetime(2024, 5, 1, 15, 30, tzinfo=BERLIN))
    target = RecordingTarget(clock)

    with pytest.raises(asyncio.CancelledError):
        await run_daily_reset(
            target,
            clock=clock,
            sleep=_sleeper(clock, stop_after_clears=3, target=target),
        )

    assert [t.date().isoformat() for t in target.cleared_at] == ["2024-05-02", "2024-05-03", "2024-05-04"]
    assert all(t.hour == 0 and t.minute == 0 for t in target.cleared_at)


@pytest.mark.asyncio
async def test_sleeps_in_bounded_chunks() -> None:
    clock = FakeClock(datetime(2024, 5, 1, 12, 0, tzinfo=BERLIN))
    target = RecordingTarget(clock)
    naps: list[float] = []

    async def _sleep(seconds: float) -> None:
        if target.cleared_at:
            raise asyncio.CancelledError
        naps.append(seconds)
        clock.advance(seconds)

    with pytest.raises(asyncio.CancelledError):
        await run_daily_reset(target, clock=clock, sleep=_sleep, recheck_seconds=3600)

    assert max(naps) <= 3600
    assert sum(naps) == pytest.approx(12 * 3600)
    assert target.cleared_at == [datetime(2024, 5, 2, tzinfo=BERLIN)]


@pytest.mark.asyncio
async def test_restart_recomputes_next_midnight_from_clock() -> None:
    # Simulated restart late on day N+1: the next reset is still midnight of N+2.
    clock = FakeClock(datetime(2024, 5, 2, 22, 15, tzinfo=BERLIN))
    target = RecordingTarget(clock)

    with pytest.raises(asyncio.CancelledError):
        await run_daily_reset(target, clock=clock, sleep=_sleeper(clock, stop_after_clears=1, target=target))

    assert target.cleared_at == [datetime(2024, 5, 3, tzinfo=BERLIN)]


@pytest.mark.asyncio
async def test_failed_clear_still_rearms() -> None:
    clock = FakeClock(datetime(2024, 5, 1, 20, 0, tzinfo=BERLIN))
    target = RecordingTarget(clock, fail_first=True)

    with pytest.raises(asyncio.CancelledError):
        await run_daily_reset(target, clock=clock, sleep=_sleeper(clock, stop_after_clears=2, target=target))

    assert [t.day for t in target.cleared_at] == [2, 3]


@pytest.mark.asyncio
async def test_clears_real_store(store: TaskStore) -> None:
    await store.add("yesterday's task")
    clock = FakeClock(datetime(2024, 5, 1, 23, 0, tzinfo=BERLIN))

    async def _sleep(seconds: float) -> None:
        if len(store) == 0:
            raise asyncio.CancelledError
        clock.advance(seconds)

    with pytest.raises(asyncio.CancelledError):
        await run_daily_reset(store, clock=clock, sleep=_sleep)

    assert store.tasks == ()
