"""
Loan Summary Engine

Aggregates loans by direction. Given and borrowed loans use the same
logic, so both sides go through _summarize_side and are then mapped onto
the LoanSummary fields of their direction.

INTEREST APPROXIMATION:
    expected = principal * rate/100 * elapsed_years
    counted  = max(0, min(expected, paid - principal))

Interest only counts once payments exceed the principal, capped at what
would have accrued since the loan date on a fixed 365-day year. This is
a heuristic, not an amortization schedule. The inner min() can go
negative; the outer max() clamps it. Keep the formula as is, any
"simplification" changes the numbers.
"""

from dataclasses import dataclass
from datetime import datetime, time, timezone
from decimal import Decimal
from typing import Iterable, Optional

from finance_tracker.models.records import Loan, LoanStatus, LoanType, utc_now
from finance_tracker.models.summaries import LoanSummary
from finance_tracker.summaries.loan_status import derive_loan_status, total_paid


ZERO = Decimal("0")
HUNDRED = Decimal("100")
SECONDS_PER_YEAR = Decimal(365 * 24 * 60 * 60)


@dataclass
class _SideTotals:
    principal: Decimal = ZERO
    repaid: Decimal = ZERO
    interest: Decimal = ZERO
    active: int = 0
    overdue: int = 0

    @property
    def outstanding(self) -> Decimal:
        return self.principal - self.repaid


def _as_utc(now: Optional[datetime]) -> datetime:
    if now is None:
        return utc_now()
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def elapsed_years(loan: Loan, now: datetime) -> Decimal:
    """Years since the loan date (taken as UTC midnight), 365-day years."""
    start = datetime.combine(loan.loan_date, time.min, tzinfo=timezone.utc)
    seconds = Decimal(str((now - start).total_seconds()))
    return seconds / SECONDS_PER_YEAR


def accrued_interest(loan: Loan, now: datetime) -> Decimal:
    """Interest counted for one loan under the approximation above."""
    paid = total_paid(loan)
    expected = loan.amount * (loan.interest_rate / HUNDRED) * elapsed_years(loan, now)
    return max(ZERO, min(expected, paid - loan.amount))


def _summarize_side(loans: list[Loan], now: datetime) -> _SideTotals:
    totals = _SideTotals()
    today = now.date()

    for loan in loans:
        totals.principal += loan.amount
        totals.repaid += total_paid(loan)
        totals.interest += accrued_interest(loan, now)

        if loan.status == LoanStatus.ACTIVE:
            totals.active += 1
        # Re-derived live rather than read from the stored status, so a
        # stale "active" past its due date is still counted as overdue
        if derive_loan_status(loan, today) == LoanStatus.OVERDUE:
            totals.overdue += 1

    return totals


def summarize_loans(
    loans: Optional[Iterable[Loan]],
    now: Optional[datetime] = None,
) -> LoanSummary:
    """
    Build the LoanSummary for a snapshot of loans.

    Args:
        loans: Loans with their payments; status should already be derived
        now: Reference instant; defaults to the current UTC time.
             Naive datetimes are taken as UTC.

    An absent or empty collection gives an all-zero summary.
    """
    now = _as_utc(now)
    loans = list(loans or [])

    given = _summarize_side(
        [loan for loan in loans if loan.loan_type == LoanType.GIVEN], now
    )
    borrowed = _summarize_side(
        [loan for loan in loans if loan.loan_type == LoanType.BORROWED], now
    )

    return LoanSummary(
        total_loans_given=given.principal,
        total_outstanding_given=given.outstanding,
        total_received_back=given.repaid,
        total_interest_earned=given.interest,
        active_given_loans=given.active,
        overdue_given_loans=given.overdue,
        total_loans_borrowed=borrowed.principal,
        total_outstanding_borrowed=borrowed.outstanding,
        total_paid_back=borrowed.repaid,
        total_interest_paid=borrowed.interest,
        active_borrowed_loans=borrowed.active,
        overdue_borrowed_loans=borrowed.overdue,
        net_loan_position=given.outstanding - borrowed.outstanding,
    )
