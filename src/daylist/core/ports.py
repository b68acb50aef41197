# src/daylist/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store and reminder scheduler depend on Protocols instead of concrete backends.
This keeps storage/notification providers swappable and makes testing easier.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

Clock = Callable[[], datetime]
# Returns the current local wall-clock time as an aware datetime.


@dataclass(slots=True, frozen=True)
class NotificationPayload:
    title: str
    body: str


class KeyValueStore(Protocol):
    """
    Minimal on-device key-value storage.

    Methods are blocking; the persistence gateway calls them from a worker thread.
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...


class Notifier(Protocol):
    """
    OS notification port: request a one-shot notification after a delay.

    Returns an opaque request id once the request is accepted.
    Raises (typically NotificationRequestError) if the request is refused.
    Delivery itself is the backend's concern.
    """

    def schedule_one_shot(self, delay_seconds: int, payload: NotificationPayload) -> Awaitable[str]: ...
