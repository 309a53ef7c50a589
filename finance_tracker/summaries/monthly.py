"""
Monthly Summary Engine

Buckets transactions by calendar month. Months without transactions are
not synthesized, so gaps in the calendar are simply absent.
"""

from typing import Iterable, Optional

from finance_tracker.models.records import Transaction
from finance_tracker.models.summaries import MonthComparison, MonthlySummary


def summarize_monthly(
    transactions: Optional[Iterable[Transaction]],
) -> list[MonthlySummary]:
    """
    One MonthlySummary per distinct YYYY-MM, sorted ascending by month.

    Consumers read the last two entries as the current and previous month,
    so the ordering matters. Zero-padded keys sort correctly as strings.
    """
    buckets: dict[str, MonthlySummary] = {}

    for transaction in transactions or []:
        bucket = buckets.get(transaction.month)
        if bucket is None:
            bucket = buckets[transaction.month] = MonthlySummary(month=transaction.month)

        if transaction.is_income:
            bucket.income += transaction.amount
        elif transaction.is_expense:
            bucket.expenses += transaction.amount

    summaries = sorted(buckets.values(), key=lambda s: s.month)
    for summary in summaries:
        summary.balance = summary.income - summary.expenses
    return summaries


def month_over_month(
    summaries: list[MonthlySummary],
) -> Optional[MonthComparison]:
    """Compare the latest month with the one before it."""
    if not summaries:
        return None

    current = summaries[-1]
    previous = summaries[-2] if len(summaries) > 1 else None
    baseline = previous or MonthlySummary(month=current.month)

    return MonthComparison(
        current=current,
        previous=previous,
        income_change=current.income - baseline.income,
        expense_change=current.expenses - baseline.expenses,
        balance_change=current.balance - baseline.balance,
    )
