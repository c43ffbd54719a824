"""
Abstract Storage Interface

DESIGN DECISION: The engine treats persistence as an opaque key-value
store of strings. This allows us to:
1. Back the book with browser-style local storage, files or a database
2. Use in-memory storage for testing
3. Keep every ledger rule out of the storage layer

The store is only touched at explicit checkpoints (load at start, save
after an accepted command). The engine never assumes a write is durable.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for the persistent store.

    Any implementation (files, sqlite, a remote KV service) must
    implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read a value.

        Returns:
            The stored string, or None when the key was never written
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Write a value, replacing any previous one.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key existed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptSnapshotError(StorageError):
    """A stored payload could not be decoded into ledger records."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"{key}: {message}")
