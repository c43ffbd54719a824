"""
Data Models Package

This package contains all Pydantic models used by the ledger engine.
Ledger records are frozen: a change always means a new snapshot.
"""

from ledger_engine.models.ledger import (
    Account,
    AccountType,
    BalanceDrift,
    Direction,
    EntryValidation,
    LedgerErrorKind,
    LedgerIssue,
    LedgerSnapshot,
    Money,
    PaymentMethod,
    StatementLine,
    Transaction,
    TransactionRequest,
    new_id,
)
from ledger_engine.models.reports import (
    BudgetEvaluation,
    BudgetReport,
    BudgetReportLine,
    BudgetStatus,
    BudgetTotals,
    CategoryTotal,
    LedgerTotals,
    Movement,
    PeriodAggregate,
    TypeBalance,
)
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
from ledger_engine.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from ledger_engine.models.money import from_minor_units, to_minor_units

__all__ = [
    # Ledger models
    "Account",
    "AccountType",
    "BalanceDrift",
    "Direction",
    "EntryValidation",
    "LedgerErrorKind",
    "LedgerIssue",
    "LedgerSnapshot",
    "Money",
    "PaymentMethod",
    "StatementLine",
    "Transaction",
    "TransactionRequest",
    "new_id",
    # Report models
    "BudgetEvaluation",
    "BudgetReport",
    "BudgetReportLine",
    "BudgetStatus",
    "BudgetTotals",
    "CategoryTotal",
    "LedgerTotals",
    "Movement",
    "PeriodAggregate",
    "TypeBalance",
    # Commands
    "ApplyTransaction",
    "CommandResult",
    "DeleteAccounts",
    "LedgerCommand",
    "OpenAccount",
    "RepairBalance",
    "SetBudgetLimit",
    "ToggleLock",
    "UpdateAccount",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Money
    "from_minor_units",
    "to_minor_units",
]
