"""
Core Record Models for Finance Tracker

These models define the strict schemas for the three persisted collections:
transactions, budgets and loans. They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Serialize to the camelCase JSON shape the collections are stored in

DESIGN DECISION: Python attributes are snake_case, stored keys are camelCase.
populate_by_name lets callers use either form when constructing records.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)
from pydantic.alias_generators import to_camel


# Decimals are written to JSON as plain numbers, matching the stored schema.
DecimalValue = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]
Amount = Annotated[DecimalValue, Field(ge=0)]

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"

SALARY_CATEGORY = "Salary"

INCOME_CATEGORIES = [
    "Salary",
    "Freelance",
    "Business",
    "Investment",
    "Gift",
    "Other Income",
]

EXPENSE_CATEGORIES = [
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Education",
    "Travel",
    "Other Expenses",
]


def new_record_id() -> str:
    """Generate a fresh opaque record id."""
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Current calendar date, interpreted in UTC."""
    return utc_now().date()


def month_key(day: date) -> str:
    """Return the zero-padded YYYY-MM key of a calendar date."""
    return day.strftime("%Y-%m")


class RecordModel(BaseModel):
    """Base model sharing the stored-schema configuration."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_storage_dict(self) -> dict:
        """Convert to the JSON-serializable dict written to storage."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction. The amount itself is never negative."""
    INCOME = "income"
    EXPENSE = "expense"


class LoanType(str, Enum):
    """
    Direction of a loan.

    GIVEN: money the user lent out (receivable).
    BORROWED: money the user owes (payable).
    """
    GIVEN = "given"
    BORROWED = "borrowed"


class LoanStatus(str, Enum):
    """
    Loan lifecycle status.

    CRITICAL: Always derived from payments and due date.
    A stored value is never trusted as truth.
    """
    ACTIVE = "active"
    PAID = "paid"
    OVERDUE = "overdue"


# =============================================================================
# TRANSACTIONS
# =============================================================================

class Transaction(RecordModel):
    """
    A single income or expense entry.

    id and created_at are assigned on creation and preserved across edits.
    """

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Unique transaction ID"
    )
    amount: Amount = Field(
        ...,
        description="Non-negative amount; the sign is carried by type"
    )
    category: str = Field(
        ...,
        description="Free-form category, conventionally one of the known lists"
    )
    description: str = Field(
        default="",
        description="What the transaction was for"
    )
    transaction_date: date = Field(
        ...,
        alias="date",
        description="Calendar date of the transaction"
    )
    type: TransactionType = Field(
        ...,
        description="income or expense"
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the record was created"
    )

    # Optional receipt attachment
    receipt_image: Optional[str] = Field(
        default=None,
        description="Receipt image as a base64 data URL"
    )
    receipt_file_name: Optional[str] = None

    @property
    def month(self) -> str:
        """YYYY-MM key of the transaction date."""
        return month_key(self.transaction_date)

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE


# =============================================================================
# BUDGETS
# =============================================================================

class CategoryBudget(RecordModel):
    """A spending cap for one category within a budget month."""

    category: str = Field(
        ...,
        min_length=1,
        description="Expense category the cap applies to"
    )
    budget_amount: Amount = Field(
        ...,
        description="Spending cap for the category"
    )


class Budget(RecordModel):
    """
    A monthly budget.

    DESIGN DECISION: At most one budget exists per month.
    Adding a budget for an existing month replaces it (see the tracker).
    """

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Unique budget ID"
    )
    month: str = Field(
        ...,
        pattern=MONTH_PATTERN,
        description="Budget month as YYYY-MM"
    )
    total_budget: Amount = Field(
        ...,
        description="Overall spending cap for the month"
    )
    category_budgets: list[CategoryBudget] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("category_budgets", mode="before")
    @classmethod
    def default_missing_category_budgets(cls, v):
        """Older records may carry no (or a null) category list."""
        return v if v is not None else []


# =============================================================================
# LOANS
# =============================================================================

class LoanPayment(RecordModel):
    """A repayment recorded against a loan."""

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Unique payment ID"
    )
    amount: Amount
    payment_date: date
    description: Optional[str] = None


class Loan(RecordModel):
    """
    A peer-to-peer loan, either given or borrowed.

    borrower_name is the counterparty: the borrower for given loans,
    the lender for borrowed ones.
    """

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Unique loan ID"
    )
    loan_type: LoanType
    borrower_name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Counterparty name"
    )
    amount: Amount = Field(
        ...,
        description="Principal"
    )
    interest_rate: Amount = Field(
        default=Decimal("0"),
        description="Annual interest rate in percent"
    )
    loan_date: date
    due_date: date
    description: str = ""
    status: LoanStatus = Field(
        default=LoanStatus.ACTIVE,
        description="Derived status; recomputed after every change"
    )
    payments: list[LoanPayment] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("payments", mode="before")
    @classmethod
    def default_missing_payments(cls, v):
        return v if v is not None else []
