# src/daylist/core/clock.py

"""
Local wall-clock helpers.

All timestamps in the app are aware datetimes. With no timezone configured the
system local zone is used (datetime.astimezone()).
"""

from __future__ import annotations

import logging
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .ports import Clock

logger = logging.getLogger(__name__)


def local_now() -> datetime:
    return datetime.now().astimezone()


def as_local(ts: datetime) -> datetime:
    """Aware copy of `ts`; naive values are taken as local wall-clock time."""
    return ts if ts.tzinfo is not None else ts.astimezone()


def make_clock(tz_name: str | None = None) -> Clock:
    """Clock for an IANA zone name; empty or unknown names fall back to the system zone."""
    name = (tz_name or "").strip()
    if not name:
        return local_now
    try:
        tz = ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using system local time", name)
        return local_now

    def _now() -> datetime:
        return datetime.now(tz)

    return _now
