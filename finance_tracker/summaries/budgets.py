"""
Budget Status Engine

Compares monthly budgets with actual spend, overall and per category.
"""

from decimal import Decimal
from typing import Iterable, Optional

from finance_tracker.models.records import Budget, Transaction
from finance_tracker.models.summaries import BudgetStatus, CategoryBudgetStatus


ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _percentage(spent: Decimal, cap: Decimal) -> Decimal:
    return (spent / cap) * HUNDRED if cap > 0 else ZERO


def budget_status(
    transactions: Optional[Iterable[Transaction]],
    budget: Budget,
) -> BudgetStatus:
    """
    Compare one budget with the expenses of its month.

    Exactly meeting a cap is not over budget. Categories without an
    entry in the budget get no status.
    """
    month_expenses = [
        t for t in transactions or []
        if t.is_expense and t.month == budget.month
    ]
    total_spent = sum((t.amount for t in month_expenses), ZERO)

    category_statuses = []
    for category_budget in budget.category_budgets:
        spent = sum(
            (t.amount for t in month_expenses if t.category == category_budget.category),
            ZERO,
        )
        category_statuses.append(CategoryBudgetStatus(
            category=category_budget.category,
            budget_amount=category_budget.budget_amount,
            spent=spent,
            remaining=category_budget.budget_amount - spent,
            percentage_used=_percentage(spent, category_budget.budget_amount),
            is_over_budget=spent > category_budget.budget_amount,
        ))

    return BudgetStatus(
        month=budget.month,
        total_budget=budget.total_budget,
        total_spent=total_spent,
        remaining_budget=budget.total_budget - total_spent,
        percentage_used=_percentage(total_spent, budget.total_budget),
        is_over_budget=total_spent > budget.total_budget,
        category_statuses=category_statuses,
    )


def summarize_budgets(
    transactions: Optional[Iterable[Transaction]],
    budgets: Optional[Iterable[Budget]],
) -> list[BudgetStatus]:
    """
    One BudgetStatus per budget, in the order the budgets were given.

    An absent budget collection yields an empty list rather than an error.
    """
    if budgets is None or isinstance(budgets, (str, bytes, dict)):
        return []

    transactions = list(transactions or [])
    return [budget_status(transactions, budget) for budget in budgets]
