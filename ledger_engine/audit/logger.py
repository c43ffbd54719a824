"""
Audit Logger

Every command the ledger book handles is logged as a structured event:
accepted entries, rejections with their reasons, drift warnings and
persistence checkpoints.

The logger is synchronous. The engine has no suspension points, and a
log call must never reorder or delay a mutation.
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from ledger_engine.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from ledger_engine.models.ledger import BalanceDrift, LedgerIssue, Transaction


structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def _issue_dicts(issues: tuple[LedgerIssue, ...]) -> list[dict]:
    return [
        {"kind": i.kind.value, "field": i.field, "message": i.message}
        for i in issues
    ]


class AuditLogger:
    """Central audit logging service for the ledger engine."""

    def __init__(self, logger_name: str = "ledger_engine.audit", level: Optional[str] = None):
        self._logger = structlog.get_logger(logger_name)
        if level:
            logging.getLogger(logger_name).setLevel(level)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity is AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity is AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity is AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_transaction_applied(
        self,
        transaction: Transaction,
        balance_after: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_applied(
            transaction_id=transaction.id,
            account_id=transaction.account_id,
            direction=transaction.direction.value,
            amount=transaction.amount,
            balance_after=balance_after,
            correlation_id=correlation_id,
        ))

    def log_transaction_rejected(
        self,
        account_id: Optional[str],
        issues: tuple[LedgerIssue, ...],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_rejected(
            account_id=account_id,
            issues=_issue_dicts(issues),
            correlation_id=correlation_id,
        ))

    def log_account_opened(
        self,
        account_id: str,
        name: str,
        account_type: str,
        opening_balance: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.account_opened(
            account_id=account_id,
            name=name,
            account_type=account_type,
            opening_balance=opening_balance,
            correlation_id=correlation_id,
        ))

    def log_account_updated(
        self,
        account_id: str,
        fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.account_updated(
            account_id=account_id,
            fields=fields,
            correlation_id=correlation_id,
        ))

    def log_lock_toggled(
        self,
        account_ids: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.account_lock_toggled(
            account_ids=account_ids,
            correlation_id=correlation_id,
        ))

    def log_accounts_deleted(
        self,
        account_ids: list[str],
        removed_transactions: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.accounts_deleted(
            account_ids=account_ids,
            removed_transactions=removed_transactions,
            correlation_id=correlation_id,
        ))

    def log_budget_limit_set(
        self,
        category: str,
        limit: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.budget_limit_set(
            category=category,
            limit=limit,
            correlation_id=correlation_id,
        ))

    def log_drift(
        self,
        drift: BalanceDrift,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.balance_drift_detected(
            account_id=drift.account_id,
            stored_balance=drift.stored_balance,
            reconstructed_balance=drift.reconstructed_balance,
            correlation_id=correlation_id,
        ))

    def log_balance_repaired(
        self,
        account_id: str,
        old_balance: int,
        new_balance: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.balance_repaired(
            account_id=account_id,
            old_balance=old_balance,
            new_balance=new_balance,
            correlation_id=correlation_id,
        ))

    def log_snapshot(
        self,
        loaded: bool,
        account_count: int,
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.snapshot_persisted(
            loaded=loaded,
            account_count=account_count,
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        ))

    def log_command_rejected(
        self,
        command: str,
        issues: tuple[LedgerIssue, ...],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.command_rejected(
            command=command,
            issues=_issue_dicts(issues),
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g. saving an entry form)
    and pass it through every command that action issues.
    """
    return uuid4()
