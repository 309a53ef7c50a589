"""
Summary Engines

Pure functions turning snapshots of records into summary views.
None of them perform I/O, hold state or mutate their inputs.
"""

from finance_tracker.summaries.budgets import budget_status, summarize_budgets
from finance_tracker.summaries.financial import summarize_finances, top_categories
from finance_tracker.summaries.loan_status import (
    derive_loan_status,
    total_paid,
    with_derived_status,
)
from finance_tracker.summaries.loans import (
    accrued_interest,
    elapsed_years,
    summarize_loans,
)
from finance_tracker.summaries.monthly import month_over_month, summarize_monthly

__all__ = [
    "accrued_interest",
    "budget_status",
    "derive_loan_status",
    "elapsed_years",
    "month_over_month",
    "summarize_budgets",
    "summarize_finances",
    "summarize_loans",
    "summarize_monthly",
    "top_categories",
    "total_paid",
    "with_derived_status",
]
