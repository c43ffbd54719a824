"""Ledger core: balance mutation, statement reconstruction, command handling."""

from ledger_engine.ledger.book import LedgerBook
from ledger_engine.ledger.mutator import apply_all, apply_transaction, repair_balance
from ledger_engine.ledger.periods import (
    day_end,
    day_start,
    period_bounds,
    resolve_entry_timestamp,
    window_start,
)
from ledger_engine.ledger.statement import (
    detect_drift,
    for_display,
    reconstruct,
    reconstructed_balance,
    sort_chronologically,
    statement_totals,
)

__all__ = [
    "LedgerBook",
    "apply_all",
    "apply_transaction",
    "day_end",
    "day_start",
    "detect_drift",
    "for_display",
    "period_bounds",
    "reconstruct",
    "reconstructed_balance",
    "repair_balance",
    "resolve_entry_timestamp",
    "sort_chronologically",
    "statement_totals",
    "window_start",
]
