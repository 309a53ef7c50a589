"""
Summary View Models

Result records produced by the summary engines. They are always newly
constructed from a snapshot of the records and never persisted.
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field

from finance_tracker.models.records import DecimalValue, RecordModel, Transaction


ZERO = Decimal("0")


class CategorySummary(RecordModel):
    """Total and count of all transactions sharing a category string."""

    category: str
    total: DecimalValue = ZERO
    transactions: int = Field(default=0, ge=0)


class FinancialSummary(RecordModel):
    """Totals and savings metrics across all transactions."""

    total_income: DecimalValue = ZERO
    total_expenses: DecimalValue = ZERO
    balance: DecimalValue = ZERO
    monthly_average: DecimalValue = ZERO
    category_summaries: list[CategorySummary] = Field(default_factory=list)
    total_salary: DecimalValue = ZERO
    total_savings: DecimalValue = ZERO
    savings_rate: DecimalValue = Field(
        default=ZERO,
        description="Savings as a percentage of total income"
    )


class MonthlySummary(RecordModel):
    """Income, expenses and balance for one YYYY-MM month."""

    month: str
    income: DecimalValue = ZERO
    expenses: DecimalValue = ZERO
    balance: DecimalValue = ZERO


class MonthComparison(RecordModel):
    """
    The latest month compared with the one before it.

    Changes are current minus previous. When there is no previous
    month, the changes equal the current month's figures.
    """

    current: MonthlySummary
    previous: Optional[MonthlySummary] = None
    income_change: DecimalValue = ZERO
    expense_change: DecimalValue = ZERO
    balance_change: DecimalValue = ZERO


class CategoryBudgetStatus(RecordModel):
    category: str
    budget_amount: DecimalValue
    spent: DecimalValue = ZERO
    remaining: DecimalValue = ZERO
    percentage_used: DecimalValue = ZERO
    is_over_budget: bool = False


class BudgetStatus(RecordModel):
    """Actual spend compared with one monthly budget."""

    month: str
    total_budget: DecimalValue
    total_spent: DecimalValue = ZERO
    remaining_budget: DecimalValue = ZERO
    percentage_used: DecimalValue = ZERO
    is_over_budget: bool = False
    category_statuses: list[CategoryBudgetStatus] = Field(default_factory=list)


class LoanSummary(RecordModel):
    """
    Aggregate loan position.

    net_loan_position is positive when the user is owed more than they owe.
    """

    # Given loans (money lent)
    total_loans_given: DecimalValue = ZERO
    total_outstanding_given: DecimalValue = ZERO
    total_received_back: DecimalValue = ZERO
    total_interest_earned: DecimalValue = ZERO
    active_given_loans: int = 0
    overdue_given_loans: int = 0

    # Borrowed loans (money owed)
    total_loans_borrowed: DecimalValue = ZERO
    total_outstanding_borrowed: DecimalValue = ZERO
    total_paid_back: DecimalValue = ZERO
    total_interest_paid: DecimalValue = ZERO
    active_borrowed_loans: int = 0
    overdue_borrowed_loans: int = 0

    net_loan_position: DecimalValue = ZERO


class Dashboard(RecordModel):
    """Every summary view, recomputed from one snapshot."""

    summary: FinancialSummary
    monthly_summaries: list[MonthlySummary] = Field(default_factory=list)
    month_comparison: Optional[MonthComparison] = None
    budget_statuses: list[BudgetStatus] = Field(default_factory=list)
    loan_summary: LoanSummary
    recent_transactions: list[Transaction] = Field(default_factory=list)
