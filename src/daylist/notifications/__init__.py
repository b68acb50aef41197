"""Reminder delivery backends (implementations of core.ports.Notifier)."""

from .local_notifier import LocalNotifier

__all__ = ["LocalNotifier"]
