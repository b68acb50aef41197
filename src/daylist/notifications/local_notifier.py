# src/daylist/notifications/local_notifier.py

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable

from ..core.ports import NotificationPayload
from ..errors import NotificationRequestError

logger = logging.getLogger(__name__)

DeliverFn = Callable[[NotificationPayload], None]


def _log_delivery(payload: NotificationPayload) -> None:
    logger.info("Reminder: %s - %s", payload.title, payload.body)


class LocalNotifier:
    """
    In-process notifier: fires reminders from the running event loop.

    Each accepted request arms loop.call_later(); when it fires, the payload goes to
    `deliver` (the console connector prints it). Requests live only as long as the
    process; there is no per-request cancel.
    """

    def __init__(self, deliver: DeliverFn | None = None) -> None:
        self._deliver = deliver or _log_delivery
        self._handles: dict[str, asyncio.TimerHandle] = {}

    def set_deliver(self, deliver: DeliverFn) -> None:
        self._deliver = deliver

    def pending_count(self) -> int:
        return len(self._handles)

    async def schedule_one_shot(self, delay_seconds: int, payload: NotificationPayload) -> str:
        if delay_seconds < 0:
            raise NotificationRequestError(f"Delay must not be negative, got {delay_seconds}")
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as exc:
            raise NotificationRequestError("No running event loop to schedule the reminder on") from exc

        request_id = uuid.uuid4().hex
        self._handles[request_id] = loop.call_later(delay_seconds, self._fire, request_id, payload)
        logger.debug("Notification %s armed in %ss", request_id, delay_seconds)
        return request_id

    def _fire(self, request_id: str, payload: NotificationPayload) -> None:
        self._handles.pop(request_id, None)
        try:
            self._deliver(payload)
        except Exception:
            logger.exception("Reminder delivery failed request=%s", request_id)

    def cancel_all(self) -> None:
        """Drop every pending reminder (process shutdown)."""
        for handle in self._handles.values():
            handle.cancel()
        if self._handles:
            logger.info("Cancelled %d pending reminders", len(self._handles))
        self._handles.clear()
