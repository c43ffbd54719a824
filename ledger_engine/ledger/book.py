"""
Ledger Book

DESIGN DECISION: The book is the single owner of the dataset.
Every mutation is a command handled here, one at a time, and every
accepted command produces a new immutable LedgerSnapshot. Nothing else
holds a writable reference to accounts or entries.

GUARANTEES:
- balances change only through the balance mutator
- a rejected command leaves the snapshot untouched
- deleting an account removes its entries in the same step
- user errors come back as LedgerIssue values, never as exceptions

The book does no locking. Callers that share one book across threads
must serialize their calls to handle().
"""

from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from ledger_engine.audit import AuditLogger
from ledger_engine.config import LedgerSettings
from ledger_engine.ledger.mutator import apply_transaction, repair_balance
from ledger_engine.ledger.periods import resolve_entry_timestamp
from ledger_engine.ledger.statement import detect_drift
from ledger_engine.models.commands import (
    ApplyTransaction,
    CommandResult,
    DeleteAccounts,
    LedgerCommand,
    OpenAccount,
    RepairBalance,
    SetBudgetLimit,
    ToggleLock,
    UpdateAccount,
)
from ledger_engine.models.ledger import (
    Account,
    Direction,
    LedgerErrorKind,
    LedgerIssue,
    LedgerSnapshot,
    Transaction,
    TransactionRequest,
)
from ledger_engine.validation import EntryValidator


Clock = Callable[[], datetime]


def _unknown_account(account_id: str) -> LedgerIssue:
    return LedgerIssue(
        kind=LedgerErrorKind.UNKNOWN_ACCOUNT,
        field="account_id",
        message=f"Account {account_id} does not exist",
    )


class LedgerBook:
    """
    Sequential command handler over the current snapshot.

    Usage:
        book = LedgerBook(snapshot)
        result = book.handle(ApplyTransaction(request=...))
        if result.accepted:
            persist(result.snapshot)
    """

    def __init__(
        self,
        snapshot: Optional[LedgerSnapshot] = None,
        settings: Optional[LedgerSettings] = None,
        validator: Optional[EntryValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Clock = datetime.now,
    ):
        self._snapshot = snapshot or LedgerSnapshot()
        self._settings = settings or LedgerSettings()
        self._validator = validator or EntryValidator()
        self._audit_logger = audit_logger
        self._clock = clock

    @property
    def snapshot(self) -> LedgerSnapshot:
        return self._snapshot

    def handle(
        self,
        command: LedgerCommand,
        correlation_id: Optional[UUID] = None,
    ) -> CommandResult:
        """
        Handle one command and advance the snapshot if it is accepted.
        """
        if isinstance(command, ApplyTransaction):
            result = self._apply_transaction(command.request, correlation_id)
        elif isinstance(command, OpenAccount):
            result = self._open_account(command, correlation_id)
        elif isinstance(command, UpdateAccount):
            result = self._update_account(command, correlation_id)
        elif isinstance(command, ToggleLock):
            result = self._toggle_lock(command, correlation_id)
        elif isinstance(command, DeleteAccounts):
            result = self._delete_accounts(command, correlation_id)
        elif isinstance(command, SetBudgetLimit):
            result = self._set_budget_limit(command, correlation_id)
        elif isinstance(command, RepairBalance):
            result = self._repair_balance(command, correlation_id)
        else:
            raise TypeError(f"Unsupported command: {type(command).__name__}")

        if result.accepted:
            self._snapshot = result.snapshot
        elif self._audit_logger and not isinstance(command, ApplyTransaction):
            self._audit_logger.log_command_rejected(
                type(command).__name__, result.issues, correlation_id
            )
        return result

    # -------------------------------------------------------------------------
    # Entries
    # -------------------------------------------------------------------------

    def _default_note(self, request: TransactionRequest, category: str) -> str:
        if request.note:
            return request.note
        if category != self._settings.general_category:
            return category
        return "سند صرف" if request.direction is Direction.DEBIT else "سند قبض"

    def _book_entry(
        self,
        snapshot: LedgerSnapshot,
        account: Account,
        transaction: Transaction,
    ) -> tuple[LedgerSnapshot, Account]:
        """Apply one finalized entry and append it to the log."""
        updated = apply_transaction(account, transaction)
        new_snapshot = snapshot.model_copy(
            update={
                "accounts": snapshot.replace_accounts([updated]),
                "transactions": snapshot.transactions + (transaction,),
                "next_sequence": snapshot.next_sequence + 1,
            }
        )
        return new_snapshot, updated

    def _apply_transaction(
        self,
        request: TransactionRequest,
        correlation_id: Optional[UUID],
    ) -> CommandResult:
        snapshot = self._snapshot
        accounts = snapshot.account_index()

        validation = self._validator.validate(request, accounts)
        if not validation.is_valid:
            if self._audit_logger:
                self._audit_logger.log_transaction_rejected(
                    request.account_id, validation.issues, correlation_id
                )
            return CommandResult(accepted=False, snapshot=snapshot, issues=validation.issues)

        account = accounts[request.account_id]
        category = request.category or self._settings.general_category
        transaction = Transaction(
            account_id=account.id,
            amount=request.amount,
            direction=request.direction,
            timestamp=resolve_entry_timestamp(request.entry_date, self._clock()),
            category=category,
            note=self._default_note(request, category),
            method=request.method,
            sequence=snapshot.next_sequence,
        )
        new_snapshot, updated = self._book_entry(snapshot, account, transaction)

        if self._audit_logger:
            self._audit_logger.log_transaction_applied(
                transaction, updated.balance, correlation_id
            )

        issues = ()
        drift = detect_drift(updated, new_snapshot.transactions)
        if drift is not None:
            issues = (drift.to_issue(),)
            if self._audit_logger:
                self._audit_logger.log_drift(drift, correlation_id)

        return CommandResult(
            accepted=True,
            snapshot=new_snapshot,
            issues=issues,
            account=updated,
            transaction=transaction,
        )

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    def _open_account(
        self,
        command: OpenAccount,
        correlation_id: Optional[UUID],
    ) -> CommandResult:
        snapshot = self._snapshot
        if command.opening_balance < 0:
            issue = LedgerIssue(
                kind=LedgerErrorKind.INVALID_AMOUNT,
                field="opening_balance",
                message="Opening balance cannot be negative; choose the credit side instead",
            )
            return CommandResult(accepted=False, snapshot=snapshot, issues=(issue,))

        account = Account(
            name=command.name,
            type=command.type,
            debt_limit=command.debt_limit,
            phone=command.phone,
            notes=command.notes,
        )
        snapshot = snapshot.model_copy(update={"accounts": snapshot.accounts + (account,)})

        opening = None
        if command.opening_balance > 0:
            opening = Transaction(
                account_id=account.id,
                amount=command.opening_balance,
                direction=command.opening_direction,
                timestamp=self._clock().replace(microsecond=0),
                category=self._settings.general_category,
                note=command.opening_note or self._settings.opening_balance_note,
                sequence=snapshot.next_sequence,
            )
            snapshot, account = self._book_entry(snapshot, account, opening)

        if self._audit_logger:
            self._audit_logger.log_account_opened(
                account.id, account.name, account.type.value, account.balance, correlation_id
            )

        return CommandResult(
            accepted=True,
            snapshot=snapshot,
            account=account,
            transaction=opening,
        )

    def _update_account(
        self,
        command: UpdateAccount,
        correlation_id: Optional[UUID],
    ) -> CommandResult:
        snapshot = self._snapshot
        account = snapshot.get_account(command.account_id)
        if account is None:
            return CommandResult(
                accepted=False,
                snapshot=snapshot,
                issues=(_unknown_account(command.account_id),),
            )

        changes = command.model_dump(
            include={"name", "type", "debt_limit", "phone", "notes"},
            exclude_unset=True,
        )
        # name and type are required on the account; None means "keep".
        for required in ("name", "type"):
            if changes.get(required, "") is None:
                del changes[required]
        updated = account.model_copy(update=changes)
        snapshot = snapshot.model_copy(
            update={"accounts": snapshot.replace_accounts([updated])}
        )

        if self._audit_logger:
            self._audit_logger.log_account_updated(
                account.id, sorted(changes), correlation_id
            )

        return CommandResult(accepted=True, snapshot=snapshot, account=updated)

    def _missing_accounts(self, account_ids: tuple[str, ...]) -> tuple[LedgerIssue, ...]:
        known = self._snapshot.account_index()
        return tuple(_unknown_account(i) for i in account_ids if i not in known)

    def _toggle_lock(
        self,
        command: ToggleLock,
        correlation_id: Optional[UUID],
    ) -> CommandResult:
        snapshot = self._snapshot
        missing = self._missing_accounts(command.account_ids)
        if missing:
            return CommandResult(accepted=False, snapshot=snapshot, issues=missing)

        targets = set(command.account_ids)
        accounts = tuple(
            a.model_copy(update={"is_locked": not a.is_locked}) if a.id in targets else a
            for a in snapshot.accounts
        )
        snapshot = snapshot.model_copy(update={"accounts": accounts})

        if self._audit_logger:
            self._audit_logger.log_lock_toggled(sorted(targets), correlation_id)

        return CommandResult(accepted=True, snapshot=snapshot)

    def _delete_accounts(
        self,
        command: DeleteAccounts,
        correlation_id: Optional[UUID],
    ) -> CommandResult:
        snapshot = self._snapshot
        missing = self._missing_accounts(command.account_ids)
        if missing:
            return CommandResult(accepted=False, snapshot=snapshot, issues=missing)

        targets = set(command.account_ids)
        remaining = tuple(t for t in snapshot.transactions if t.account_id not in targets)
        removed = len(snapshot.transactions) - len(remaining)
        snapshot = snapshot.model_copy(
            update={
                "accounts": tuple(a for a in snapshot.accounts if a.id not in targets),
                "transactions": remaining,
            }
        )

        if self._audit_logger:
            self._audit_logger.log_accounts_deleted(sorted(targets), removed, correlation_id)

        return CommandResult(accepted=True, snapshot=snapshot)

    # -------------------------------------------------------------------------
    # Budgets and reconciliation
    # -------------------------------------------------------------------------

    def _set_budget_limit(
        self,
        command: SetBudgetLimit,
        correlation_id: Optional[UUID],
    ) -> CommandResult:
        snapshot = self._snapshot
        if command.limit < 0:
            issue = LedgerIssue(
                kind=LedgerErrorKind.INVALID_AMOUNT,
                field="limit",
                message=f"Budget limit cannot be negative (got {command.limit})",
            )
            return CommandResult(accepted=False, snapshot=snapshot, issues=(issue,))

        snapshot = snapshot.with_budget_limit(command.category, command.limit)

        if self._audit_logger:
            self._audit_logger.log_budget_limit_set(
                command.category, command.limit, correlation_id
            )

        return CommandResult(accepted=True, snapshot=snapshot)

    def _repair_balance(
        self,
        command: RepairBalance,
        correlation_id: Optional[UUID],
    ) -> CommandResult:
        snapshot = self._snapshot
        account = snapshot.get_account(command.account_id)
        if account is None:
            return CommandResult(
                accepted=False,
                snapshot=snapshot,
                issues=(_unknown_account(command.account_id),),
            )

        repaired = repair_balance(account, snapshot.transactions)
        snapshot = snapshot.model_copy(
            update={"accounts": snapshot.replace_accounts([repaired])}
        )

        if self._audit_logger and repaired.balance != account.balance:
            self._audit_logger.log_balance_repaired(
                account.id, account.balance, repaired.balance, correlation_id
            )

        return CommandResult(accepted=True, snapshot=snapshot, account=repaired)
