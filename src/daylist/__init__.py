"""
daylist: a personal task list that forgets everything at midnight.

Subpackages:
- tasks: task model, ordering, persistence gateway, store, reminders, daily reset
- storage: key-value backends used by the persistence gateway
- notifications: one-shot reminder delivery
- connectors / cli: console front-end and composition root
"""

__version__ = "0.3.0"
