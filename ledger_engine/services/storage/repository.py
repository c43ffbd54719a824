"""
Ledger Repository

Maps a LedgerSnapshot to three keys of the key-value store:

    <prefix>accounts        JSON list of accounts
    <prefix>transactions    JSON list of entries
    <prefix>budget_limits   JSON object {category: limit}

Money is stored as JSON integers, so values round-trip exactly.
Missing keys load as empty collections (first start).
"""

from typing import Optional

from pydantic import TypeAdapter, ValidationError

from ledger_engine.models.ledger import Account, LedgerSnapshot, Money, Transaction
from ledger_engine.services.storage.interface import (
    CorruptSnapshotError,
    KeyValueStoreInterface,
)


_accounts_adapter = TypeAdapter(list[Account])
_transactions_adapter = TypeAdapter(list[Transaction])
_limits_adapter = TypeAdapter(dict[str, Money])


class LedgerRepository:
    """Loads and saves whole snapshots at the engine's checkpoints."""

    def __init__(self, store: KeyValueStoreInterface, key_prefix: str = "sa_"):
        self._store = store
        self._prefix = key_prefix

    @property
    def keys(self) -> tuple[str, str, str]:
        return (
            f"{self._prefix}accounts",
            f"{self._prefix}transactions",
            f"{self._prefix}budget_limits",
        )

    def _read(self, key: str, adapter: TypeAdapter, empty):
        raw: Optional[str] = self._store.get(key)
        if raw is None or not raw.strip():
            return empty
        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            raise CorruptSnapshotError(key, str(e)) from e

    def load(self) -> LedgerSnapshot:
        """
        Read the snapshot back.

        Entries are returned to insertion order using their sequence
        numbers; entries stored without one keep their stored order.

        Raises:
            CorruptSnapshotError: If a stored payload does not decode
        """
        accounts_key, transactions_key, limits_key = self.keys

        accounts = self._read(accounts_key, _accounts_adapter, [])
        transactions = self._read(transactions_key, _transactions_adapter, [])
        limits = self._read(limits_key, _limits_adapter, {})

        transactions.sort(key=lambda t: t.sequence)
        next_sequence = max((t.sequence for t in transactions), default=0) + 1

        return LedgerSnapshot(
            accounts=tuple(accounts),
            transactions=tuple(transactions),
            budget_limits=limits,
            next_sequence=next_sequence,
        )

    def save(self, snapshot: LedgerSnapshot) -> None:
        """Write all three keys."""
        accounts_key, transactions_key, limits_key = self.keys

        self._store.set(
            accounts_key,
            _accounts_adapter.dump_json(list(snapshot.accounts)).decode("utf-8"),
        )
        self._store.set(
            transactions_key,
            _transactions_adapter.dump_json(list(snapshot.transactions)).decode("utf-8"),
        )
        self._store.set(
            limits_key,
            _limits_adapter.dump_json(dict(snapshot.budget_limits)).decode("utf-8"),
        )
