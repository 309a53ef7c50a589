"""
Command Models for Record Mutations

Drafts describe a record the user is about to create (no id, no timestamps,
no derived fields). Updates describe a partial edit with named optional
fields.

DESIGN DECISION: Partial updates are explicit models rather than arbitrary
dicts spread onto a record. Only fields that were actually set are merged,
and the merged record is validated again before it replaces the old one.
Identity fields (id, created_at) cannot be expressed in an update at all.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, TypeVar

from pydantic import ConfigDict, Field

from finance_tracker.models.records import (
    MONTH_PATTERN,
    Amount,
    Budget,
    CategoryBudget,
    Loan,
    LoanPayment,
    LoanType,
    RecordModel,
    Transaction,
    TransactionType,
    utc_today,
)


RecordT = TypeVar("RecordT", bound=RecordModel)


class CommandModel(RecordModel):
    """
    Base for user input.

    Text is trimmed here, on the way in. Stored records keep their
    strings verbatim, so loading and saving never rewrites them.
    """

    model_config = ConfigDict(str_strip_whitespace=True)


# =============================================================================
# DRAFTS - new records
# =============================================================================

class TransactionDraft(CommandModel):
    """A transaction as submitted by the user."""

    amount: Amount
    category: str
    description: str = ""
    transaction_date: date = Field(default_factory=utc_today, alias="date")
    type: TransactionType = TransactionType.EXPENSE
    receipt_image: Optional[str] = None
    receipt_file_name: Optional[str] = None

    def to_record(self) -> Transaction:
        """Create the record with a fresh id and creation timestamp."""
        return Transaction(**self.model_dump())


class BudgetDraft(CommandModel):
    """A monthly budget as submitted by the user."""

    month: str = Field(..., pattern=MONTH_PATTERN)
    total_budget: Amount
    category_budgets: list[CategoryBudget] = Field(default_factory=list)

    def to_record(self) -> Budget:
        """
        Create the record.

        Category budgets with a zero amount are dropped: they carry
        no cap and would only show up as empty rows.
        """
        return Budget(
            month=self.month,
            total_budget=self.total_budget,
            category_budgets=[
                cb for cb in self.category_budgets if cb.budget_amount > 0
            ],
        )


class LoanDraft(CommandModel):
    """A loan as submitted by the user. Payments start empty."""

    loan_type: LoanType
    borrower_name: str = Field(..., min_length=1, max_length=200)
    amount: Amount
    interest_rate: Amount = Decimal("0")
    loan_date: date = Field(default_factory=utc_today)
    due_date: date
    description: str = ""

    def to_record(self) -> Loan:
        # Status is provisional until the tracker derives it
        return Loan(**self.model_dump())


class PaymentDraft(CommandModel):
    """A loan repayment as submitted by the user."""

    amount: Amount
    payment_date: date = Field(default_factory=utc_today)
    description: Optional[str] = None

    def to_record(self) -> LoanPayment:
        return LoanPayment(**self.model_dump())


# =============================================================================
# UPDATES - partial edits
# =============================================================================

class TransactionUpdate(CommandModel):
    amount: Optional[Amount] = None
    category: Optional[str] = None
    description: Optional[str] = None
    transaction_date: Optional[date] = Field(default=None, alias="date")
    type: Optional[TransactionType] = None
    receipt_image: Optional[str] = None
    receipt_file_name: Optional[str] = None


class BudgetUpdate(CommandModel):
    month: Optional[str] = Field(default=None, pattern=MONTH_PATTERN)
    total_budget: Optional[Amount] = None
    category_budgets: Optional[list[CategoryBudget]] = None


class LoanUpdate(CommandModel):
    """
    Editable loan fields.

    status and payments are absent on purpose: status is derived
    and payments are only appended through the payment flow.
    """

    loan_type: Optional[LoanType] = None
    borrower_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    amount: Optional[Amount] = None
    interest_rate: Optional[Amount] = None
    loan_date: Optional[date] = None
    due_date: Optional[date] = None
    description: Optional[str] = None


def apply_update(record: RecordT, update: RecordModel) -> RecordT:
    """
    Merge the explicitly-set fields of an update into a record.

    Returns a new, re-validated record. The input record is not modified.

    Raises:
        pydantic.ValidationError: If the merged record is invalid
    """
    changes = update.model_dump(exclude_unset=True)
    if not changes:
        return record

    merged = {**record.model_dump(), **changes}
    return type(record).model_validate(merged)
