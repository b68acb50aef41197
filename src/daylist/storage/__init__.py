"""Key-value storage backends for the persistence gateway."""

from .kv_store import SqliteKeyValueStore

__all__ = ["SqliteKeyValueStore"]
