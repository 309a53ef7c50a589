"""Tests for the monthly summary engine."""

import pytest
from datetime import date
from decimal import Decimal

from finance_tracker.models import Transaction
from finance_tracker.summaries import month_over_month, summarize_monthly


def _tx(amount, type_, on):
    return Transaction(
        amount=Decimal(str(amount)),
        type=type_,
        category="Other",
        date=on,
    )


class TestSummarizeMonthly:
    """Tests for summarize_monthly."""

    def test_buckets_sorted_ascending(self):
        """Test months are sorted even when transactions arrive out of order."""
        summaries = summarize_monthly([
            _tx(100, "income", date(2024, 3, 1)),
            _tx(40, "expense", date(2023, 12, 31)),
            _tx(60, "expense", date(2024, 3, 20)),
            _tx(500, "income", date(2024, 1, 15)),
        ])
        assert [s.month for s in summaries] == ["2023-12", "2024-01", "2024-03"]
        march = summaries[-1]
        assert march.income == Decimal("100")
        assert march.expenses == Decimal("60")
        assert march.balance == Decimal("40")

    def test_gaps_not_synthesized(self):
        """Test that months without transactions are absent."""
        summaries = summarize_monthly([
            _tx(1, "income", date(2024, 1, 1)),
            _tx(1, "income", date(2024, 4, 1)),
        ])
        assert [s.month for s in summaries] == ["2024-01", "2024-04"]

    def test_empty(self):
        """Test that no transactions gives no months."""
        assert summarize_monthly(None) == []
        assert summarize_monthly([]) == []


class TestMonthOverMonth:
    """Tests for month_over_month."""

    def test_changes_against_previous_month(self):
        """Test changes are current minus previous."""
        summaries = summarize_monthly([
            _tx(1000, "income", date(2024, 1, 1)),
            _tx(200, "expense", date(2024, 1, 2)),
            _tx(1200, "income", date(2024, 2, 1)),
            _tx(500, "expense", date(2024, 2, 2)),
        ])
        comparison = month_over_month(summaries)
        assert comparison.current.month == "2024-02"
        assert comparison.previous.month == "2024-01"
        assert comparison.income_change == Decimal("200")
        assert comparison.expense_change == Decimal("300")
        assert comparison.balance_change == Decimal("-100")

    def test_single_month(self):
        """Test a single month is compared with zero."""
        comparison = month_over_month(summarize_monthly([_tx(80, "income", date(2024, 5, 1))]))
        assert comparison.previous is None
        assert comparison.income_change == Decimal("80")

    def test_no_months(self):
        """Test that there is nothing to compare without data."""
        assert month_over_month([]) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
