"""
Main Orchestrator for the Ledger Engine

Ties the components together for the application shell:
1. Load the snapshot from the store (checkpoint)
2. Funnel every mutation through the ledger book
3. Save after each accepted command (checkpoint)
4. Serve read-side projections computed from the current snapshot

DESIGN DECISION: The orchestrator owns exactly one LedgerBook. The shell
never touches accounts or entries directly; it submits commands and reads
projections. Debouncing saves is the shell's business: pass
autosave=False and call save() when it suits.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from ledger_engine.audit import AuditLogger, create_correlation_id
from ledger_engine.config import LedgerSettings, get_settings
from ledger_engine.ledger.book import Clock, LedgerBook
from ledger_engine.ledger.periods import DateLike
from ledger_engine.ledger.statement import detect_drift, for_display, reconstruct
from ledger_engine.models.commands import CommandResult, LedgerCommand
from ledger_engine.models.ledger import BalanceDrift, LedgerSnapshot, StatementLine
from ledger_engine.models.reports import BudgetReport, LedgerTotals, Movement
from ledger_engine.queries import budget_report, daily_movement, ledger_totals
from ledger_engine.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    LedgerRepository,
)


class LedgerService:
    """
    Application-facing facade over one ledger book.

    Flow:
    1. load()      read the snapshot from the store
    2. submit()    handle one command, save if accepted
    3. statement(), budget_report(), ... read-only projections
    """

    def __init__(
        self,
        repository: LedgerRepository,
        settings: Optional[LedgerSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Clock = datetime.now,
        autosave: bool = True,
    ):
        self._repository = repository
        self._settings = settings or get_settings().ledger
        self._audit_logger = audit_logger
        self._clock = clock
        self._autosave = autosave
        self._book = self._new_book(LedgerSnapshot())

    def _new_book(self, snapshot: LedgerSnapshot) -> LedgerBook:
        return LedgerBook(
            snapshot,
            settings=self._settings,
            audit_logger=self._audit_logger,
            clock=self._clock,
        )

    @property
    def snapshot(self) -> LedgerSnapshot:
        return self._book.snapshot

    def load(self) -> LedgerSnapshot:
        """Replace the in-memory state with what the store holds."""
        snapshot = self._repository.load()
        self._book = self._new_book(snapshot)
        if self._audit_logger:
            self._audit_logger.log_snapshot(
                True, len(snapshot.accounts), len(snapshot.transactions)
            )
        return snapshot

    def save(self) -> None:
        snapshot = self._book.snapshot
        self._repository.save(snapshot)
        if self._audit_logger:
            self._audit_logger.log_snapshot(
                False, len(snapshot.accounts), len(snapshot.transactions)
            )

    def submit(
        self,
        command: LedgerCommand,
        correlation_id: Optional[UUID] = None,
    ) -> CommandResult:
        """
        Handle one command.

        A rejected command changes nothing and writes nothing.
        """
        correlation_id = correlation_id or create_correlation_id()
        result = self._book.handle(command, correlation_id)
        if result.accepted and self._autosave:
            self.save()
        return result

    # -------------------------------------------------------------------------
    # Read-side projections
    # -------------------------------------------------------------------------

    def statement(
        self,
        account_id: str,
        start: Optional[DateLike] = None,
        end: Optional[DateLike] = None,
    ) -> list[StatementLine]:
        """Most-recent-first statement, optionally limited to a window."""
        lines = reconstruct(account_id, self.snapshot.transactions)
        return for_display(lines, start, end)

    def budget_report(self, start: DateLike, end: DateLike) -> BudgetReport:
        snapshot = self.snapshot
        return budget_report(
            snapshot.transactions,
            snapshot.budget_limits,
            start,
            end,
            settings=self._settings,
        )

    def daily_movement(self, day: Optional[date] = None) -> Movement:
        if day is None:
            day = self._clock().date()
        return daily_movement(self.snapshot.transactions, day)

    def totals(self) -> LedgerTotals:
        return ledger_totals(self.snapshot.accounts)

    def drift_report(self) -> list[BalanceDrift]:
        """Every account whose stored balance disagrees with its entries."""
        snapshot = self.snapshot
        drifts = []
        for account in snapshot.accounts:
            drift = detect_drift(account, snapshot.transactions)
            if drift is not None:
                drifts.append(drift)
                if self._audit_logger:
                    self._audit_logger.log_drift(drift)
        return drifts


def create_app_components(
    store: Optional[KeyValueStoreInterface] = None,
) -> LedgerService:
    """
    Factory function to create the ledger service.

    Args:
        store: Key-value store to use. When None, a JSON file store is
            used if LEDGER_STORAGE_DATA_DIR is set, otherwise memory.

    Returns:
        A LedgerService with its snapshot already loaded
    """
    settings = get_settings()

    if store is None:
        data_dir = settings.storage.data_dir
        store = JsonFileKeyValueStore(data_dir) if data_dir else InMemoryKeyValueStore()

    repository = LedgerRepository(store, key_prefix=settings.storage.key_prefix)
    audit_logger = AuditLogger(level=settings.app.log_level)

    service = LedgerService(
        repository,
        settings=settings.ledger,
        audit_logger=audit_logger,
    )
    service.load()
    return service
