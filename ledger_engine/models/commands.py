"""
Ledger Commands

Every mutation of the book is expressed as one of these commands and
handed to LedgerBook.handle(). Commands are validated by pydantic at
construction time for their shape; business rules (positive amounts,
existing accounts) are checked by the book and reported in the result.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ledger_engine.models.ledger import (
    Account,
    AccountType,
    Direction,
    LedgerIssue,
    LedgerSnapshot,
    Money,
    Transaction,
    TransactionRequest,
)


class ApplyTransaction(BaseModel):
    """Validate a submitted entry and apply it to its account."""
    model_config = ConfigDict(frozen=True)

    request: TransactionRequest


class OpenAccount(BaseModel):
    """
    Create an account.

    A non-zero opening balance is booked as a synthetic opening entry,
    never written into the balance field directly.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=200)
    type: AccountType = AccountType.CUSTOMER
    opening_balance: Money = 0
    opening_direction: Direction = Field(
        default=Direction.DEBIT,
        description="Debit: the account owes us. Credit: we owe the account."
    )
    opening_note: Optional[str] = None
    debt_limit: Optional[Money] = Field(default=None, ge=0)
    phone: Optional[str] = None
    notes: Optional[str] = None


class UpdateAccount(BaseModel):
    """Edit descriptive fields. The balance is not editable."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    account_id: str
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    type: Optional[AccountType] = None
    debt_limit: Optional[Money] = Field(default=None, ge=0)
    phone: Optional[str] = None
    notes: Optional[str] = None


class ToggleLock(BaseModel):
    """Flip the advisory lock of each listed account."""
    model_config = ConfigDict(frozen=True)

    account_ids: tuple[str, ...] = Field(..., min_length=1)


class DeleteAccounts(BaseModel):
    """Remove accounts together with all of their entries."""
    model_config = ConfigDict(frozen=True)

    account_ids: tuple[str, ...] = Field(..., min_length=1)


class SetBudgetLimit(BaseModel):
    """Set the approved limit of a budget category (0 = no budget)."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    category: str = Field(..., min_length=1)
    limit: Money


class RepairBalance(BaseModel):
    """Replace a drifted stored balance with its reconstruction."""
    model_config = ConfigDict(frozen=True)

    account_id: str


LedgerCommand = Union[
    ApplyTransaction,
    OpenAccount,
    UpdateAccount,
    ToggleLock,
    DeleteAccounts,
    SetBudgetLimit,
    RepairBalance,
]


class CommandResult(BaseModel):
    """
    Outcome of one command.

    On rejection `snapshot` is the unchanged input snapshot and `issues`
    says why. Warnings (balance drift) may accompany an accepted command.
    """
    model_config = ConfigDict(frozen=True)

    accepted: bool
    snapshot: LedgerSnapshot
    issues: tuple[LedgerIssue, ...] = ()
    account: Optional[Account] = None
    transaction: Optional[Transaction] = None

    @property
    def errors(self) -> tuple[LedgerIssue, ...]:
        return tuple(i for i in self.issues if i.severity == "error")

    @property
    def warnings(self) -> tuple[LedgerIssue, ...]:
        return tuple(i for i in self.issues if i.severity == "warning")
