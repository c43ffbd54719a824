"""
Audit Models for the Ledger Engine

Every accepted or rejected command produces an audit event. Events go to
the structured log; they are a trace for debugging and for the surrounding
app, not an immutable audit trail (entries may still be edited or deleted
by the app).
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Entries
    TRANSACTION_APPLIED = "transaction_applied"
    TRANSACTION_REJECTED = "transaction_rejected"

    # Accounts
    ACCOUNT_OPENED = "account_opened"
    ACCOUNT_UPDATED = "account_updated"
    ACCOUNT_LOCK_TOGGLED = "account_lock_toggled"
    ACCOUNTS_DELETED = "accounts_deleted"

    # Budgets
    BUDGET_LIMIT_SET = "budget_limit_set"

    # Reconciliation
    BALANCE_DRIFT_DETECTED = "balance_drift_detected"
    BALANCE_REPAIRED = "balance_repaired"

    # Persistence checkpoints
    SNAPSHOT_LOADED = "snapshot_loaded"
    SNAPSHOT_SAVED = "snapshot_saved"

    COMMAND_REJECTED = "command_rejected"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=datetime.now)

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'account', 'transaction', 'budget')"
    )
    entity_id: Optional[str] = None

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Ties together the events of one user action"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_applied(tx, balance, correlation_id)
    """

    @staticmethod
    def transaction_applied(
        transaction_id: str,
        account_id: str,
        direction: str,
        amount: int,
        balance_after: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_APPLIED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Applied {direction} of {amount} to account {account_id}",
            details={
                "account_id": account_id,
                "direction": direction,
                "amount": amount,
                "balance_after": balance_after,
            },
        )

    @staticmethod
    def transaction_rejected(
        account_id: Optional[str],
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Entry rejected with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def account_opened(
        account_id: str,
        name: str,
        account_type: str,
        opening_balance: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_OPENED,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Account opened: {name}",
            details={
                "type": account_type,
                "opening_balance": opening_balance,
            },
        )

    @staticmethod
    def account_updated(
        account_id: str,
        fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_UPDATED,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Account updated: {', '.join(fields) or 'no changes'}",
            details={"fields": fields},
        )

    @staticmethod
    def account_lock_toggled(
        account_ids: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_LOCK_TOGGLED,
            entity_type="account",
            correlation_id=correlation_id,
            description=f"Lock toggled on {len(account_ids)} accounts",
            details={"account_ids": account_ids},
        )

    @staticmethod
    def accounts_deleted(
        account_ids: list[str],
        removed_transactions: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNTS_DELETED,
            severity=AuditSeverity.WARNING,
            entity_type="account",
            correlation_id=correlation_id,
            description=(
                f"Deleted {len(account_ids)} accounts and "
                f"{removed_transactions} entries"
            ),
            details={
                "account_ids": account_ids,
                "removed_transactions": removed_transactions,
            },
        )

    @staticmethod
    def budget_limit_set(
        category: str,
        limit: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_LIMIT_SET,
            entity_type="budget",
            entity_id=category,
            correlation_id=correlation_id,
            description=f"Budget limit for {category} set to {limit}",
            details={"limit": limit},
        )

    @staticmethod
    def balance_drift_detected(
        account_id: str,
        stored_balance: int,
        reconstructed_balance: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_DRIFT_DETECTED,
            severity=AuditSeverity.WARNING,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description="Stored balance disagrees with its reconstruction",
            details={
                "stored_balance": stored_balance,
                "reconstructed_balance": reconstructed_balance,
            },
        )

    @staticmethod
    def balance_repaired(
        account_id: str,
        old_balance: int,
        new_balance: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_REPAIRED,
            entity_type="account",
            entity_id=account_id,
            correlation_id=correlation_id,
            description=f"Balance recomputed: {old_balance} -> {new_balance}",
            details={
                "old_balance": old_balance,
                "new_balance": new_balance,
            },
        )

    @staticmethod
    def snapshot_persisted(
        loaded: bool,
        account_count: int,
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=(
                AuditEventType.SNAPSHOT_LOADED if loaded else AuditEventType.SNAPSHOT_SAVED
            ),
            severity=AuditSeverity.DEBUG,
            entity_type="snapshot",
            correlation_id=correlation_id,
            description=(
                f"Snapshot {'loaded' if loaded else 'saved'}: "
                f"{account_count} accounts, {transaction_count} entries"
            ),
            details={
                "account_count": account_count,
                "transaction_count": transaction_count,
            },
        )

    @staticmethod
    def command_rejected(
        command: str,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMAND_REJECTED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"{command} rejected with {len(issues)} issues",
            details={"command": command, "issues": issues},
        )
