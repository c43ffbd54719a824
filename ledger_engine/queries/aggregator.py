"""
Period Aggregation

DESIGN DECISION: Aggregation is a pure read-side projection.
Every call rescans the entries it is given; there is no cached or
incremental state. Datasets are a single household or shop book, so
O(n) per query is fine and the results can never go stale.

Only debit entries count as spend.
"""

from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Optional

from ledger_engine.config import GENERAL_CATEGORY
from ledger_engine.ledger.periods import DateLike, day_end, day_start, period_bounds
from ledger_engine.models.ledger import Account, AccountType, Direction, Transaction
from ledger_engine.models.reports import (
    CategoryTotal,
    LedgerTotals,
    Movement,
    PeriodAggregate,
    TypeBalance,
)


def category_of(transaction: Transaction, general_category: str = GENERAL_CATEGORY) -> str:
    """Entry category with absence mapped to the general category."""
    return transaction.category or general_category


def aggregate(
    transactions: Iterable[Transaction],
    category: Optional[str],
    start: DateLike,
    end: DateLike,
    general_category: str = GENERAL_CATEGORY,
) -> PeriodAggregate:
    """
    Debit spend of one category inside [start, end] and over all time.

    Args:
        transactions: Entries to scan (any order, any accounts)
        category: Target category; None means the general category
        start: Window start (a date starts at midnight)
        end: Window end, always extended to 23:59:59.999 of its day
        general_category: Name of the general sentinel category

    Returns:
        PeriodAggregate with spent_in_period and total_spent
    """
    target = category or general_category
    lower, upper = period_bounds(start, end)

    spent_in_period = 0
    total_spent = 0
    for t in transactions:
        if t.direction is not Direction.DEBIT:
            continue
        if category_of(t, general_category) != target:
            continue
        total_spent += t.amount
        if lower <= t.timestamp <= upper:
            spent_in_period += t.amount

    return PeriodAggregate(
        category=target,
        spent_in_period=spent_in_period,
        total_spent=total_spent,
        period_start=lower,
        period_end=upper,
    )


def category_breakdown(
    transactions: Iterable[Transaction],
    general_category: str = GENERAL_CATEGORY,
) -> list[CategoryTotal]:
    """Debit spend per category, largest first."""
    totals: dict[str, int] = defaultdict(int)
    for t in transactions:
        if t.direction is Direction.DEBIT:
            totals[category_of(t, general_category)] += t.amount

    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [CategoryTotal(category=name, total=total) for name, total in ordered]


def _movement(
    selected: list[Transaction],
    day: Optional[date] = None,
    category: Optional[str] = None,
) -> Movement:
    total_debit = sum(t.amount for t in selected if t.direction is Direction.DEBIT)
    total_credit = sum(t.amount for t in selected if t.direction is Direction.CREDIT)
    return Movement(
        day=day,
        category=category,
        transactions=tuple(selected),
        total_debit=total_debit,
        total_credit=total_credit,
    )


def daily_movement(transactions: Iterable[Transaction], day: DateLike) -> Movement:
    """All entries recorded on one calendar day."""
    lower, upper = day_start(day), day_end(day)
    selected = [t for t in transactions if lower <= t.timestamp <= upper]
    return _movement(selected, day=lower.date())


def category_movement(
    transactions: Iterable[Transaction],
    category: Optional[str],
    general_category: str = GENERAL_CATEGORY,
) -> Movement:
    """All entries booked against one category, any date, any direction."""
    target = category or general_category
    selected = [t for t in transactions if category_of(t, general_category) == target]
    return _movement(selected, category=target)


def ledger_totals(accounts: Iterable[Account]) -> LedgerTotals:
    """Sum of debit positions versus sum of credit positions."""
    owed_to_us = 0
    owed_by_us = 0
    for account in accounts:
        if account.balance > 0:
            owed_to_us += account.balance
        else:
            owed_by_us += -account.balance
    return LedgerTotals(owed_to_us=owed_to_us, owed_by_us=owed_by_us)


def balances_by_type(accounts: Iterable[Account]) -> list[TypeBalance]:
    """Summed balance per account type, in AccountType declaration order."""
    counts: dict[AccountType, int] = defaultdict(int)
    sums: dict[AccountType, int] = defaultdict(int)
    for account in accounts:
        counts[account.type] += 1
        sums[account.type] += account.balance

    return [
        TypeBalance(type=kind, account_count=counts[kind], balance=sums[kind])
        for kind in AccountType
        if counts[kind]
    ]


def sort_by_recency(
    accounts: Iterable[Account],
    descending: bool = True,
    locked: Optional[bool] = None,
) -> list[Account]:
    """
    Accounts ordered by their last entry.

    Accounts that never had an entry count as the oldest. `locked` keeps
    only locked (True) or only unlocked (False) accounts.
    """
    selected = [
        a for a in accounts
        if locked is None or a.is_locked == locked
    ]
    return sorted(
        selected,
        key=lambda a: (a.last_transaction_at is not None, a.last_transaction_at or datetime.min),
        reverse=descending,
    )
