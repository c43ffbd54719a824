"""
Core Data Models for the Ledger Engine

These models define the strict schemas for accounts and entries.
They are designed to:
1. Keep money as integer minor units (no float drift when folding)
2. Be immutable: every change produces a new snapshot
3. Be serializable for the key-value store without loss

DESIGN DECISION: Money fields use strict ints. A float handed to a money
field is a bug at the call site and fails loudly at construction time.
"""

from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Iterable, Mapping, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


Money = Annotated[int, Field(strict=True)]


def new_id() -> str:
    """Opaque unique identifier for accounts and entries."""
    return uuid4().hex


def wall_clock(value: datetime) -> datetime:
    """
    The value's wall time as a naive datetime.

    Every stored timestamp follows this convention, so entries recorded
    with an aware clock still sort against back-dated ones.
    """
    return value.replace(tzinfo=None) if value.tzinfo is not None else value


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class AccountType(str, Enum):
    """
    Role of an account in the book.

    Purely classificatory: the type never changes balance arithmetic.
    """
    CUSTOMER = "customer"
    SUPPLIER = "supplier"
    EMPLOYEE = "employee"
    EXPENSE = "expense"
    DEBT = "debt"
    OTHER = "other"
    CASH = "cash"


class Direction(str, Enum):
    """
    Direction of an entry.

    Single-sided: a debit raises the owning account's balance,
    a credit lowers it. There is no balancing counter-entry.
    """
    DEBIT = "debit"
    CREDIT = "credit"

    @property
    def sign(self) -> int:
        return 1 if self is Direction.DEBIT else -1


class PaymentMethod(str, Enum):
    """How the entry was settled. No effect on balances."""
    CASH = "cash"
    CREDIT = "credit"


class LedgerErrorKind(str, Enum):
    """
    Every error the engine reports.

    All of them are returned as values; none is raised.
    """
    INVALID_AMOUNT = "invalid_amount"
    UNKNOWN_ACCOUNT = "unknown_account"
    BALANCE_DRIFT_DETECTED = "balance_drift_detected"


# =============================================================================
# CORE LEDGER MODELS
# =============================================================================

class Account(BaseModel):
    """
    A named ledger subject holding a running balance.

    Positive balance: the account owes the book owner (debit position).
    Negative balance: the book owner owes the account (credit position).

    CRITICAL: balance changes only through the balance mutator.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Assigned at creation, never changes"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display label"
    )
    balance: Money = Field(
        default=0,
        description="Signed balance in minor units"
    )
    type: AccountType = Field(
        default=AccountType.CUSTOMER,
        description="Account role"
    )
    last_transaction_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp of the last applied entry (recency sort only)"
    )
    is_locked: bool = Field(
        default=False,
        description="Advisory lock; the engine preserves but never enforces it"
    )
    debt_limit: Optional[Money] = Field(
        default=None,
        ge=0,
        description="Advisory ceiling; never enforced"
    )
    phone: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = Field(default=None, max_length=1000)

    @field_validator('last_transaction_at')
    @classmethod
    def naive_last_transaction_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return wall_clock(v) if v is not None else None

    @property
    def position(self) -> Direction:
        """Which side the balance sits on. Zero counts as debit."""
        return Direction.DEBIT if self.balance >= 0 else Direction.CREDIT


class Transaction(BaseModel):
    """
    A single signed monetary entry against exactly one account.

    The amount is always positive; the sign lives in `direction`.
    `timestamp` is the only ordering key. `sequence` records insertion
    order so ties on timestamp stay stable across a save/load cycle.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(default_factory=new_id, min_length=1)
    account_id: str = Field(..., min_length=1)
    amount: Money = Field(
        ...,
        gt=0,
        description="Positive amount in minor units"
    )
    direction: Direction
    timestamp: datetime
    category: Optional[str] = Field(
        default=None,
        description="Budget category; None means the general category"
    )
    note: str = Field(default="", max_length=1000)
    method: PaymentMethod = PaymentMethod.CASH
    sequence: int = Field(
        default=0,
        ge=0,
        description="Insertion ordinal assigned by the ledger book"
    )

    @field_validator('timestamp')
    @classmethod
    def naive_timestamp(cls, v: datetime) -> datetime:
        return wall_clock(v)

    @property
    def signed_amount(self) -> int:
        return self.direction.sign * self.amount


class TransactionRequest(BaseModel):
    """
    A user-submitted entry before id and timestamp assignment.

    IMPORTANT: amount and account_id are deliberately unconstrained here.
    The entry validator reports problems as result values; pydantic must
    not turn a form mistake into an exception.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    account_id: Optional[str] = None
    amount: Optional[Money] = None
    direction: Direction = Direction.DEBIT
    entry_date: date = Field(
        default_factory=date.today,
        description="Calendar date chosen on the form"
    )
    category: Optional[str] = None
    note: str = Field(default="", max_length=1000)
    method: PaymentMethod = PaymentMethod.CASH


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class LedgerIssue(BaseModel):
    """A single problem found by the engine."""
    model_config = ConfigDict(frozen=True)

    kind: LedgerErrorKind
    field: str = Field(
        ...,
        description="Field or entity the issue is about"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning)$",
    )


class EntryValidation(BaseModel):
    """Outcome of validating one TransactionRequest."""
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    issues: tuple[LedgerIssue, ...] = ()

    @property
    def error_kind(self) -> Optional[LedgerErrorKind]:
        """Kind of the first error, if any."""
        for issue in self.issues:
            if issue.severity == "error":
                return issue.kind
        return None

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")


# =============================================================================
# STATEMENT MODELS
# =============================================================================

class StatementLine(BaseModel):
    """
    One entry of a reconstructed statement.

    running_balance is the balance right after this entry, fixed when the
    statement is folded. Re-sorting lines for display never changes it.
    """
    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=1, description="1-based position in chronological order")
    transaction: Transaction
    running_balance: int


class BalanceDrift(BaseModel):
    """Disagreement between a stored balance and its reconstruction."""
    model_config = ConfigDict(frozen=True)

    account_id: str
    stored_balance: int
    reconstructed_balance: int

    @property
    def difference(self) -> int:
        return self.stored_balance - self.reconstructed_balance

    def to_issue(self) -> LedgerIssue:
        return LedgerIssue(
            kind=LedgerErrorKind.BALANCE_DRIFT_DETECTED,
            field="balance",
            message=(
                f"Stored balance {self.stored_balance} differs from "
                f"reconstructed balance {self.reconstructed_balance} "
                f"for account {self.account_id}"
            ),
            severity="warning",
        )


# =============================================================================
# SNAPSHOT
# =============================================================================

class LedgerSnapshot(BaseModel):
    """
    The full dataset at one point in time.

    Only the ledger book produces new snapshots. Transactions are kept in
    insertion order.

    CRITICAL: budget_limits is a read-only mapping. Snapshots share it,
    so a new limit always means a new mapping (with_budget_limit).
    """
    model_config = ConfigDict(frozen=True)

    accounts: tuple[Account, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    budget_limits: Mapping[str, Money] = Field(default_factory=dict, validate_default=True)
    next_sequence: int = Field(default=1, ge=1)

    @field_validator('budget_limits')
    @classmethod
    def freeze_budget_limits(cls, v: Mapping[str, int]) -> Mapping[str, int]:
        return MappingProxyType(dict(v))

    @field_serializer('budget_limits')
    def serialize_budget_limits(self, v: Mapping[str, int]) -> dict[str, int]:
        return dict(v)

    def get_account(self, account_id: Optional[str]) -> Optional[Account]:
        if not account_id:
            return None
        for account in self.accounts:
            if account.id == account_id:
                return account
        return None

    def account_index(self) -> dict[str, Account]:
        return {account.id: account for account in self.accounts}

    def transactions_for(self, account_id: str) -> tuple[Transaction, ...]:
        return tuple(t for t in self.transactions if t.account_id == account_id)

    def replace_accounts(self, updated: Iterable[Account]) -> tuple[Account, ...]:
        """Account tuple with the given snapshots swapped in by id."""
        by_id = {account.id: account for account in updated}
        return tuple(by_id.get(account.id, account) for account in self.accounts)

    def with_budget_limit(self, category: str, limit: int) -> "LedgerSnapshot":
        """Copy of this snapshot with one category limit set."""
        limits = dict(self.budget_limits)
        limits[category] = limit
        return self.model_copy(update={"budget_limits": MappingProxyType(limits)})
