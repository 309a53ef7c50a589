"""
Financial Summary Engine

Aggregates transactions into totals, savings metrics and a per-category
breakdown in a single pass.
"""

from decimal import Decimal
from typing import Iterable, Optional

from finance_tracker.models.records import SALARY_CATEGORY, Transaction
from finance_tracker.models.summaries import CategorySummary, FinancialSummary


ZERO = Decimal("0")
HUNDRED = Decimal("100")


def summarize_finances(
    transactions: Optional[Iterable[Transaction]],
) -> FinancialSummary:
    """
    Build the FinancialSummary for a snapshot of transactions.

    - Salary is a literal, case-sensitive match on the "Salary" category.
    - Savings never go negative: a net loss yields zero savings.
    - Categories mix income and expense and keep first-seen order.
    - Every zero denominator yields zero.

    An absent or empty collection gives an all-zero summary.
    """
    total_income = ZERO
    total_salary = ZERO
    total_expenses = ZERO
    months: set[str] = set()
    categories: dict[str, CategorySummary] = {}

    for transaction in transactions or []:
        if transaction.is_income:
            total_income += transaction.amount
            if transaction.category == SALARY_CATEGORY:
                total_salary += transaction.amount
        elif transaction.is_expense:
            total_expenses += transaction.amount

        months.add(transaction.month)

        entry = categories.get(transaction.category)
        if entry is None:
            entry = categories[transaction.category] = CategorySummary(
                category=transaction.category,
            )
        entry.total += transaction.amount
        entry.transactions += 1

    balance = total_income - total_expenses
    total_savings = max(balance, ZERO)
    savings_rate = (total_savings / total_income) * HUNDRED if total_income > 0 else ZERO
    monthly_average = balance / len(months) if months else ZERO

    return FinancialSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        balance=balance,
        monthly_average=monthly_average,
        category_summaries=list(categories.values()),
        total_salary=total_salary,
        total_savings=total_savings,
        savings_rate=savings_rate,
    )


def top_categories(
    summary: FinancialSummary,
    limit: int = 5,
) -> list[CategorySummary]:
    """
    Categories with the largest totals first.

    The summary's own list keeps its first-seen order.
    """
    ranked = sorted(summary.category_summaries, key=lambda c: c.total, reverse=True)
    return ranked[:limit]
