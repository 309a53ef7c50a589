"""
Loan Status Derivation

A loan's status is a pure function of its payments and due date:

    paid     - payments cover the principal (takes priority)
    overdue  - not paid and the due date is before today
    active   - otherwise

DESIGN DECISION: Dates are calendar dates compared at day granularity.
A loan due today is still active; it becomes overdue tomorrow.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from finance_tracker.models.records import Loan, LoanStatus, utc_today


def total_paid(loan: Loan) -> Decimal:
    """Sum of all payments recorded against a loan."""
    return sum((payment.amount for payment in loan.payments), Decimal("0"))


def derive_loan_status(loan: Loan, today: Optional[date] = None) -> LoanStatus:
    """
    Compute the lifecycle status of a loan.

    Args:
        loan: The loan with its full payment list
        today: Reference date; defaults to the current UTC date

    Returns:
        The derived LoanStatus. The stored status is ignored.
    """
    today = today or utc_today()

    if total_paid(loan) >= loan.amount:
        return LoanStatus.PAID
    if loan.due_date < today:
        return LoanStatus.OVERDUE
    return LoanStatus.ACTIVE


def with_derived_status(loan: Loan, today: Optional[date] = None) -> Loan:
    """Return a copy of the loan carrying its freshly derived status."""
    return loan.model_copy(update={"status": derive_loan_status(loan, today)})
