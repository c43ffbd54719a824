"""Read-side projections: period aggregation and budget evaluation."""

from ledger_engine.queries.aggregator import (
    aggregate,
    balances_by_type,
    category_breakdown,
    category_movement,
    category_of,
    daily_movement,
    ledger_totals,
    sort_by_recency,
)
from ledger_engine.queries.budget import budget_report, evaluate, roll_up

__all__ = [
    "aggregate",
    "balances_by_type",
    "budget_report",
    "category_breakdown",
    "category_movement",
    "category_of",
    "daily_movement",
    "evaluate",
    "ledger_totals",
    "roll_up",
    "sort_by_recency",
]
