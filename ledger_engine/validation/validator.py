"""
Entry Validation

Rejects malformed entries before they reach the ledger.

Checks:
- amount must be a strictly positive integer (zero, negative and
  unparseable amounts are all invalid, whatever the direction)
- account_id must name an existing account

IMPORTANT: Validation NEVER raises and NEVER fixes anything.
It reports every problem it finds so the form can show them together.
"""

from typing import Iterable, Mapping, Optional, Union

from ledger_engine.models.ledger import (
    Account,
    EntryValidation,
    LedgerErrorKind,
    LedgerIssue,
    TransactionRequest,
)


AccountLookup = Union[Mapping[str, Account], Iterable[Account]]


def _as_index(accounts: AccountLookup) -> Mapping[str, Account]:
    if isinstance(accounts, Mapping):
        return accounts
    return {account.id: account for account in accounts}


class EntryValidator:
    """
    Validates a TransactionRequest against the known accounts.

    Pure: the same request and accounts always give the same result.
    """

    def _check_amount(self, amount: Optional[int]) -> Optional[LedgerIssue]:
        if amount is None:
            return LedgerIssue(
                kind=LedgerErrorKind.INVALID_AMOUNT,
                field="amount",
                message="Amount is required",
            )
        if amount <= 0:
            return LedgerIssue(
                kind=LedgerErrorKind.INVALID_AMOUNT,
                field="amount",
                message=f"Amount must be greater than zero (got {amount})",
            )
        return None

    def _check_account(
        self,
        account_id: Optional[str],
        accounts: Mapping[str, Account],
    ) -> Optional[LedgerIssue]:
        if not account_id:
            return LedgerIssue(
                kind=LedgerErrorKind.UNKNOWN_ACCOUNT,
                field="account_id",
                message="No account selected",
            )
        if account_id not in accounts:
            return LedgerIssue(
                kind=LedgerErrorKind.UNKNOWN_ACCOUNT,
                field="account_id",
                message=f"Account {account_id} does not exist",
            )
        return None

    def validate(
        self,
        candidate: TransactionRequest,
        accounts: AccountLookup,
    ) -> EntryValidation:
        """
        Validate one proposed entry.

        Args:
            candidate: The entry as submitted, before id/timestamp assignment
            accounts: Known accounts, as an id mapping or any iterable

        Returns:
            EntryValidation listing every issue found
        """
        index = _as_index(accounts)
        issues = [
            issue
            for issue in (
                self._check_amount(candidate.amount),
                self._check_account(candidate.account_id, index),
            )
            if issue is not None
        ]
        return EntryValidation(is_valid=not issues, issues=tuple(issues))

    def summarize(self, result: EntryValidation) -> str:
        """
        Generate a user-friendly summary of validation results.

        This is what the entry form shows next to the save button.
        """
        if result.is_valid:
            return "Entry is valid."

        lines = ["The entry cannot be saved:"]
        for issue in result.issues:
            lines.append(f"   • {issue.message}")
        return "\n".join(lines)


_default_validator = EntryValidator()


def validate_entry(
    candidate: TransactionRequest,
    accounts: AccountLookup,
) -> EntryValidation:
    """Module-level shortcut for EntryValidator().validate()."""
    return _default_validator.validate(candidate, accounts)
