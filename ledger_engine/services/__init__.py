"""Services package."""

from ledger_engine.services.storage import (
    CorruptSnapshotError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    LedgerRepository,
    StorageError,
)

__all__ = [
    "CorruptSnapshotError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStoreInterface",
    "LedgerRepository",
    "StorageError",
]
