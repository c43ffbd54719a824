"""
Report Models

Plain records produced by the read-side projections (period aggregation,
budget evaluation, daily movement). They carry no behavior beyond a few
derived properties and are recomputed on every request.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ledger_engine.models.ledger import AccountType, Transaction


class BudgetStatus(str, Enum):
    """Budget classification for a category."""
    SAFE = "safe"
    APPROACHING = "approaching"
    EXCEEDED = "exceeded"


class PeriodAggregate(BaseModel):
    """Debit spend of one category, inside a window and over all time."""
    model_config = ConfigDict(frozen=True)

    category: str
    spent_in_period: int = Field(..., ge=0)
    total_spent: int = Field(..., ge=0)
    period_start: datetime
    period_end: datetime


class BudgetEvaluation(BaseModel):
    """
    Spend compared against an approved limit.

    usage_ratio is None when no budget is configured (limit of zero).
    """
    model_config = ConfigDict(frozen=True)

    category: str
    total_spent: int
    approved_limit: int
    remaining: int
    status: BudgetStatus
    usage_ratio: Optional[Decimal] = None


class BudgetReportLine(BaseModel):
    """One row of the budget report."""
    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=1)
    category: str
    spent_in_period: int
    total_spent: int
    approved_limit: int
    remaining: int
    status: BudgetStatus


class BudgetTotals(BaseModel):
    """Grand total over the rolled-up categories."""
    model_config = ConfigDict(frozen=True)

    spent_in_period: int = 0
    total_spent: int = 0
    approved: int = 0
    remaining: int = 0

    @property
    def is_exceeded(self) -> bool:
        return self.remaining < 0


class BudgetReport(BaseModel):
    """
    Budget report for a date window.

    `lines` feed the grand total. `excluded_lines` (maintenance and any
    other configured category) are evaluated the same way but reported
    below the total, never inside it.
    """
    model_config = ConfigDict(frozen=True)

    period_start: datetime
    period_end: datetime
    lines: tuple[BudgetReportLine, ...] = ()
    excluded_lines: tuple[BudgetReportLine, ...] = ()
    totals: BudgetTotals = Field(default_factory=BudgetTotals)


class CategoryTotal(BaseModel):
    """Debit spend of one category."""
    model_config = ConfigDict(frozen=True)

    category: str
    total: int


class Movement(BaseModel):
    """
    A set of entries with their debit ("in") and credit ("out") totals.

    Either `day` or `category` says what the set was selected by.
    """
    model_config = ConfigDict(frozen=True)

    day: Optional[date] = None
    category: Optional[str] = None
    transactions: tuple[Transaction, ...] = ()
    total_debit: int = 0
    total_credit: int = 0


class LedgerTotals(BaseModel):
    """What the book is owed and what it owes, across all accounts."""
    model_config = ConfigDict(frozen=True)

    owed_to_us: int = 0
    owed_by_us: int = 0

    @property
    def net(self) -> int:
        return self.owed_to_us - self.owed_by_us


class TypeBalance(BaseModel):
    """Summed balance of the accounts of one type."""
    model_config = ConfigDict(frozen=True)

    type: AccountType
    account_count: int
    balance: int
