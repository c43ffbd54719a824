"""
Statement Reconstruction

Rebuilds an account's statement from the raw entry log:
1. keep the account's entries
2. sort by timestamp ascending (ties: insertion sequence, then input order)
3. fold from ZERO, never from the cached Account.balance
4. pair each entry with the balance right after it

The fold is self-contained, so it doubles as the audit of the stored
balance: if the last running balance and Account.balance disagree, the
account has drifted.
"""

from datetime import datetime
from typing import Iterable, Optional

from ledger_engine.ledger.periods import DateLike, day_end, in_window, window_start
from ledger_engine.models.ledger import (
    Account,
    BalanceDrift,
    Direction,
    StatementLine,
    Transaction,
)


def _chronological_key(transaction: Transaction) -> tuple[datetime, int]:
    return transaction.timestamp, transaction.sequence


def sort_chronologically(transactions: Iterable[Transaction]) -> list[Transaction]:
    """
    Oldest first.

    Equal timestamps fall back to the insertion sequence. Entries that
    share both keep their input order (sorted() is stable).
    """
    return sorted(transactions, key=_chronological_key)


def reconstruct(account_id: str, transactions: Iterable[Transaction]) -> list[StatementLine]:
    """
    Fold an account's entries into a balance-annotated statement.

    Returns an empty list when the account has no entries, which implies
    a balance of zero.
    """
    own = sort_chronologically(t for t in transactions if t.account_id == account_id)

    lines = []
    running = 0
    for index, transaction in enumerate(own, start=1):
        running += transaction.signed_amount
        lines.append(
            StatementLine(index=index, transaction=transaction, running_balance=running)
        )
    return lines


def reconstructed_balance(account_id: str, transactions: Iterable[Transaction]) -> int:
    """Balance after the last entry, or zero for an account with none."""
    lines = reconstruct(account_id, transactions)
    return lines[-1].running_balance if lines else 0


def for_display(
    lines: Iterable[StatementLine],
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
) -> list[StatementLine]:
    """
    Most-recent-first view of a reconstructed statement.

    Optionally limited to a window: the start is read the same way as in
    period_bounds(), the end runs through the whole day. Running balances
    are the ones computed by reconstruct(); nothing is refolded here.
    """
    lower = window_start(start) if start is not None else None
    upper = day_end(end) if end is not None else None

    visible = [
        line for line in lines
        if in_window(line.transaction.timestamp, lower, upper)
    ]
    # Reverse of fold order, so equal timestamps also come out newest first.
    return sorted(visible, key=lambda line: line.index, reverse=True)


def statement_totals(lines: Iterable[StatementLine]) -> tuple[int, int]:
    """Total debit and total credit of the given lines."""
    total_debit = 0
    total_credit = 0
    for line in lines:
        if line.transaction.direction is Direction.DEBIT:
            total_debit += line.transaction.amount
        else:
            total_credit += line.transaction.amount
    return total_debit, total_credit


def detect_drift(
    account: Account,
    transactions: Iterable[Transaction],
) -> Optional[BalanceDrift]:
    """
    Compare the stored balance with its reconstruction.

    Returns None when they agree. Drift is a soft condition: the caller
    decides whether to offer a repair.
    """
    rebuilt = reconstructed_balance(account.id, transactions)
    if rebuilt == account.balance:
        return None
    return BalanceDrift(
        account_id=account.id,
        stored_balance=account.balance,
        reconstructed_balance=rebuilt,
    )
