"""
Abstract Storage Interface

The tracker persists through a small string key-value interface, the same
shape as browser local storage. Implementations:
1. InMemoryStorage - for tests and as a fallback
2. JsonFileStorage - a single JSON document on disk

The interface is intentionally tiny. Ledger serialization lives one level
up, in LedgerStore.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorage(ABC):
    """
    Abstract interface for string key-value storage.

    Any storage implementation must implement these methods.
    All operations are synchronous.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key (e.g., 'expenses')

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Raises:
            StorageWriteError: If the value could not be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is a no-op.

        Raises:
            StorageWriteError: If the change could not be written
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List all stored keys."""
        pass

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored data could not be read from the backend."""
    pass


class StorageWriteError(StorageError):
    """Data could not be written to the backend."""
    pass
