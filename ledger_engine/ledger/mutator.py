"""
Balance Mutator

The only code path that changes Account.balance. Each entry is applied
exactly once, producing a new account snapshot; the input account is
never modified.

The one exception is repair_balance(), the explicit recompute action
offered when drift is detected. It replaces the stored balance with the
value reconstructed from the entries themselves.
"""

from typing import Iterable

from ledger_engine.ledger.statement import reconstruct
from ledger_engine.models.ledger import Account, Transaction


def apply_transaction(account: Account, transaction: Transaction) -> Account:
    """
    Apply one validated entry to its account.

    Raises:
        ValueError: the entry belongs to another account. This is a
            programming error in the caller, not a user input problem.
    """
    if transaction.account_id != account.id:
        raise ValueError(
            f"Entry {transaction.id} belongs to account {transaction.account_id}, "
            f"not {account.id}"
        )

    return account.model_copy(
        update={
            "balance": account.balance + transaction.signed_amount,
            "last_transaction_at": transaction.timestamp,
        }
    )


def apply_all(account: Account, transactions: Iterable[Transaction]) -> Account:
    """Apply several entries in the order given."""
    for transaction in transactions:
        account = apply_transaction(account, transaction)
    return account


def repair_balance(account: Account, transactions: Iterable[Transaction]) -> Account:
    """
    Replace the stored balance with its from-scratch reconstruction.

    last_transaction_at follows the latest remaining entry; it is cleared
    when the account has none.
    """
    lines = reconstruct(account.id, transactions)
    if not lines:
        return account.model_copy(update={"balance": 0, "last_transaction_at": None})

    last = lines[-1]
    return account.model_copy(
        update={
            "balance": last.running_balance,
            "last_transaction_at": last.transaction.timestamp,
        }
    )
