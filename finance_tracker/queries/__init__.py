"""Transaction query package."""

from finance_tracker.queries.filters import (
    TransactionQuery,
    filter_by_date_range,
    filter_transactions,
    known_categories,
    recent_transactions,
    relative_range,
)

__all__ = [
    "TransactionQuery",
    "filter_by_date_range",
    "filter_transactions",
    "known_categories",
    "recent_transactions",
    "relative_range",
]
