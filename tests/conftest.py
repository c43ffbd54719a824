"""Shared fixtures for the ledger engine tests."""

from datetime import datetime

import pytest

from ledger_engine.audit import AuditLogger
from ledger_engine.config import LedgerSettings
from ledger_engine.ledger.book import LedgerBook
from ledger_engine.models.audit import AuditEvent
from ledger_engine.models.ledger import Direction, Transaction


class RecordingAuditLogger(AuditLogger):
    """Keeps every event in memory instead of only writing it to the log."""

    def __init__(self):
        super().__init__(logger_name="ledger_engine.audit.test")
        self.events: list[AuditEvent] = []

    def log(self, event: AuditEvent) -> None:
        self.events.append(event)

    @property
    def event_types(self) -> list[str]:
        return [e.event_type.value for e in self.events]


class FixedClock:
    """Callable clock that returns a settable instant."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def make_transaction(
    account_id: str,
    amount: int,
    direction: Direction = Direction.DEBIT,
    timestamp: datetime = datetime(2024, 3, 1, 12, 0),
    category=None,
    sequence: int = 0,
) -> Transaction:
    return Transaction(
        account_id=account_id,
        amount=amount,
        direction=direction,
        timestamp=timestamp,
        category=category,
        sequence=sequence,
    )


@pytest.fixture
def settings() -> LedgerSettings:
    return LedgerSettings()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 3, 15, 10, 30, 45, 123456))


@pytest.fixture
def audit_logger() -> RecordingAuditLogger:
    return RecordingAuditLogger()


@pytest.fixture
def book(settings, clock, audit_logger) -> LedgerBook:
    return LedgerBook(settings=settings, audit_logger=audit_logger, clock=clock)
