"""Services package."""

from expense_tracker.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
    LedgerStore,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
    "LedgerStore",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
