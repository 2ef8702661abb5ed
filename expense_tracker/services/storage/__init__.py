"""
Storage Services Package

Provides the key-value storage interface, its implementations, and the
LedgerStore that serializes ledgers on top of it.
"""

from expense_tracker.services.storage.interface import (
    KeyValueStorage,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from expense_tracker.services.storage.json_file import JsonFileStorage
from expense_tracker.services.storage.ledger_store import LedgerStore
from expense_tracker.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "KeyValueStorage",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
    "LedgerStore",
]
