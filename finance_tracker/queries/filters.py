"""
Transaction Queries

DESIGN DECISION: Filtering is DETERMINISTIC and runs on the in-memory
snapshot. A TransactionQuery describes what to keep; filter_transactions
applies it. Nothing here touches storage or mutates its input.
"""

import calendar
from datetime import date, timedelta
from typing import Iterable, Optional

from pydantic import BaseModel, Field, model_validator

from finance_tracker.models.records import Transaction, TransactionType


class TransactionQuery(BaseModel):
    """
    Filters for listing transactions.

    Every filter is optional; an empty query keeps everything.
    """

    type_filter: Optional[TransactionType] = None
    category_filter: Optional[str] = None
    search: Optional[str] = Field(
        default=None,
        description="Case-insensitive text matched against description and category"
    )
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    limit: Optional[int] = Field(default=None, ge=1)

    @model_validator(mode="after")
    def validate_dates(self) -> "TransactionQuery":
        if self.date_from and self.date_to and self.date_to < self.date_from:
            raise ValueError("date_to cannot be before date_from")
        return self


def _matches(transaction: Transaction, query: TransactionQuery) -> bool:
    if query.type_filter and transaction.type != query.type_filter:
        return False
    if query.category_filter and transaction.category != query.category_filter:
        return False
    if query.date_from and transaction.transaction_date < query.date_from:
        return False
    if query.date_to and transaction.transaction_date > query.date_to:
        return False
    if query.search:
        needle = query.search.lower()
        if (
            needle not in transaction.description.lower()
            and needle not in transaction.category.lower()
        ):
            return False
    return True


def filter_transactions(
    transactions: Iterable[Transaction],
    query: TransactionQuery,
) -> list[Transaction]:
    """
    Apply a query, newest transaction date first.

    Ties keep the snapshot's order.
    """
    results = [t for t in transactions if _matches(t, query)]
    results.sort(key=lambda t: t.transaction_date, reverse=True)
    if query.limit is not None:
        results = results[:query.limit]
    return results


def filter_by_date_range(
    transactions: Iterable[Transaction],
    start: date,
    end: date,
) -> list[Transaction]:
    """Transactions dated within [start, end], in their original order."""
    return [t for t in transactions if start <= t.transaction_date <= end]


def relative_range(period: str, today: date) -> tuple[date, date]:
    """
    Date range for the quick filters of the transaction list.

    Args:
        period: "today", "week" (last 7 days) or "month" (since the same
                day last month)
        today: Reference date

    Raises:
        ValueError: For an unknown period
    """
    if period == "today":
        return today, today
    if period == "week":
        return today - timedelta(days=7), today
    if period == "month":
        return _one_month_before(today), today
    raise ValueError(f"Unknown period: {period}. Use today, week or month")


def _one_month_before(day: date) -> date:
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    # Clamp to the last day of a shorter month (e.g. 31 Mar -> 28/29 Feb)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def recent_transactions(
    transactions: Iterable[Transaction],
    limit: int = 5,
) -> list[Transaction]:
    """The most recently created transactions, newest first."""
    return sorted(transactions, key=lambda t: t.created_at, reverse=True)[:limit]


def known_categories(transactions: Iterable[Transaction]) -> list[str]:
    """Distinct categories in use, sorted alphabetically."""
    return sorted({t.category for t in transactions})
