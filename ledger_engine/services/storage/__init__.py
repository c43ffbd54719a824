"""
Storage Services Package

Provides the abstract key-value store interface, two backends and the
repository that maps ledger snapshots onto the store.
"""

from ledger_engine.services.storage.interface import (
    CorruptSnapshotError,
    KeyValueStoreInterface,
    StorageError,
)
from ledger_engine.services.storage.backends import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)
from ledger_engine.services.storage.repository import LedgerRepository

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    # Exceptions
    "CorruptSnapshotError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "LedgerRepository",
]
