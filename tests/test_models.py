"""
Tests for Finance Tracker

Test strategy:
1. Unit tests for individual components (models, engines, storage)
2. Integration tests for the tracker (with in-memory storage)
3. No real API calls in tests (use mocks)
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from pydantic import ValidationError

from finance_tracker.models import (
    Budget,
    BudgetDraft,
    BudgetUpdate,
    CategoryBudget,
    Loan,
    LoanDraft,
    LoanPayment,
    LoanStatus,
    LoanType,
    LoanUpdate,
    ReceiptAttachment,
    ReceiptGuess,
    Transaction,
    TransactionDraft,
    TransactionType,
    TransactionUpdate,
    apply_update,
    month_key,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestTransactionModel:
    """Tests for the Transaction record."""

    def test_transaction_creation(self):
        """Test Transaction model creation with generated id and timestamp."""
        transaction = Transaction(
            amount=Decimal("42.50"),
            category="Food & Dining",
            description="Lunch",
            date=date(2024, 1, 10),
            type=TransactionType.EXPENSE,
        )
        assert transaction.id
        assert transaction.created_at.tzinfo is not None
        assert transaction.transaction_date == date(2024, 1, 10)
        assert transaction.is_expense is True
        assert transaction.is_income is False

    def test_transaction_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            Transaction(
                amount=Decimal("-1"),
                category="Food & Dining",
                date=date(2024, 1, 10),
                type="expense",
            )

    def test_transaction_rejects_unknown_type(self):
        """Test that the type must be income or expense."""
        with pytest.raises(ValidationError):
            Transaction(
                amount=Decimal("1"),
                category="Other",
                date=date(2024, 1, 10),
                type="transfer",
            )

    def test_transaction_rejects_malformed_date(self):
        """Test that a date string that is not a calendar date is rejected."""
        with pytest.raises(ValidationError):
            Transaction(
                amount=Decimal("1"),
                category="Other",
                date="2024-13-45",
                type="expense",
            )

    def test_transaction_keeps_text_verbatim(self):
        """Test that stored text fields are not rewritten on load."""
        transaction = Transaction.model_validate({
            "amount": 100,
            "category": " Salary",
            "description": "  bonus ",
            "date": "2024-01-01",
            "type": "income",
        })
        assert transaction.category == " Salary"
        assert transaction.to_storage_dict()["category"] == " Salary"
        assert transaction.to_storage_dict()["description"] == "  bonus "

    def test_draft_strips_whitespace(self):
        """Test that user input is trimmed before it becomes a record."""
        draft = TransactionDraft(
            amount=Decimal("1"),
            category="  Salary  ",
            description=" pay ",
            type="income",
        )
        transaction = draft.to_record()
        assert transaction.category == "Salary"
        assert transaction.description == "pay"

    def test_transaction_month(self):
        """Test the YYYY-MM month key is zero-padded."""
        transaction = Transaction(
            amount=Decimal("1"),
            category="Other",
            date=date(2024, 3, 9),
            type="expense",
        )
        assert transaction.month == "2024-03"
        assert month_key(date(2023, 12, 31)) == "2023-12"

    def test_transaction_storage_dict_is_camel_case(self):
        """Test the stored shape uses camelCase keys and numeric amounts."""
        transaction = Transaction(
            id="1700000000000",
            amount=Decimal("12.5"),
            category="Shopping",
            date=date(2024, 2, 1),
            type="expense",
            receipt_file_name="shop.jpg",
        )
        stored = transaction.to_storage_dict()
        assert stored["id"] == "1700000000000"
        assert stored["date"] == "2024-02-01"
        assert stored["amount"] == 12.5
        assert stored["type"] == "expense"
        assert stored["receiptFileName"] == "shop.jpg"
        assert "createdAt" in stored
        assert "receiptImage" not in stored

    def test_transaction_loads_stored_shape(self):
        """Test a stored camelCase record validates back into a Transaction."""
        transaction = Transaction.model_validate({
            "id": "1700000000000",
            "amount": 99,
            "category": "Salary",
            "description": "",
            "date": "2024-01-05",
            "type": "income",
            "createdAt": "2024-01-05T10:00:00.000Z",
        })
        assert transaction.id == "1700000000000"
        assert transaction.amount == Decimal("99")
        assert transaction.created_at == datetime(2024, 1, 5, 10, tzinfo=timezone.utc)


class TestBudgetModel:
    """Tests for Budget and CategoryBudget."""

    def test_budget_month_pattern(self):
        """Test that the month must be YYYY-MM."""
        with pytest.raises(ValidationError):
            Budget(month="2024-1", total_budget=Decimal("100"))
        with pytest.raises(ValidationError):
            Budget(month="2024-13", total_budget=Decimal("100"))

    def test_budget_missing_category_budgets(self):
        """Test that a stored budget without categoryBudgets loads with an empty list."""
        budget = Budget.model_validate({
            "id": "b1",
            "month": "2024-01",
            "totalBudget": 500,
            "createdAt": "2024-01-01T00:00:00Z",
        })
        assert budget.category_budgets == []

    def test_budget_null_category_budgets(self):
        """Test that a null categoryBudgets loads as an empty list."""
        budget = Budget.model_validate({
            "month": "2024-01",
            "totalBudget": 500,
            "categoryBudgets": None,
        })
        assert budget.category_budgets == []

    def test_budget_draft_drops_zero_category_budgets(self):
        """Test that zero category caps are dropped when the budget is created."""
        draft = BudgetDraft(
            month="2024-01",
            total_budget=Decimal("500"),
            category_budgets=[
                CategoryBudget(category="Food & Dining", budget_amount=Decimal("200")),
                CategoryBudget(category="Travel", budget_amount=Decimal("0")),
            ],
        )
        budget = draft.to_record()
        assert [cb.category for cb in budget.category_budgets] == ["Food & Dining"]


class TestLoanModels:
    """Tests for Loan and LoanPayment."""

    def test_loan_defaults(self):
        """Test a new loan starts active with no payments."""
        loan = LoanDraft(
            loan_type=LoanType.GIVEN,
            borrower_name="Alex",
            amount=Decimal("1000"),
            loan_date=date(2024, 1, 1),
            due_date=date(2024, 6, 1),
        ).to_record()
        assert loan.status == LoanStatus.ACTIVE
        assert loan.payments == []
        assert loan.interest_rate == Decimal("0")

    def test_loan_missing_payments(self):
        """Test that a stored loan with null payments loads with an empty list."""
        loan = Loan.model_validate({
            "id": "l1",
            "loanType": "borrowed",
            "borrowerName": "Sam",
            "amount": 200,
            "interestRate": 0,
            "loanDate": "2024-01-01",
            "dueDate": "2024-02-01",
            "status": "active",
            "payments": None,
        })
        assert loan.payments == []

    def test_loan_rejects_empty_counterparty(self):
        """Test that the counterparty name is required."""
        with pytest.raises(ValidationError):
            Loan(
                loan_type="given",
                borrower_name="",
                amount=Decimal("10"),
                loan_date=date(2024, 1, 1),
                due_date=date(2024, 2, 1),
            )
        with pytest.raises(ValidationError):
            LoanDraft(
                loan_type="given",
                borrower_name="   ",
                amount=Decimal("10"),
                loan_date=date(2024, 1, 1),
                due_date=date(2024, 2, 1),
            )

    def test_payment_rejects_negative_amount(self):
        """Test that negative payments are rejected."""
        with pytest.raises(ValidationError):
            LoanPayment(amount=Decimal("-5"), payment_date=date(2024, 1, 1))


class TestUpdates:
    """Tests for explicit partial updates."""

    def _transaction(self) -> Transaction:
        return Transaction(
            id="t1",
            amount=Decimal("10"),
            category="Shopping",
            description="Socks",
            date=date(2024, 1, 1),
            type="expense",
        )

    def test_apply_update_merges_only_set_fields(self):
        """Test that unset fields keep their current values."""
        original = self._transaction()
        updated = apply_update(original, TransactionUpdate(amount=Decimal("12")))
        assert updated.amount == Decimal("12")
        assert updated.description == "Socks"
        assert updated.id == "t1"
        assert updated.created_at == original.created_at

    def test_apply_update_does_not_mutate(self):
        """Test that the original record is left unchanged."""
        original = self._transaction()
        apply_update(original, TransactionUpdate(category="Travel"))
        assert original.category == "Shopping"

    def test_apply_update_empty_returns_same_record(self):
        """Test that an empty update is a no-op."""
        original = self._transaction()
        assert apply_update(original, TransactionUpdate()) is original

    def test_apply_update_by_alias(self):
        """Test that the stored key name can be used in updates."""
        updated = apply_update(self._transaction(), TransactionUpdate(date=date(2024, 5, 5)))
        assert updated.transaction_date == date(2024, 5, 5)

    def test_apply_update_revalidates(self):
        """Test that a merged record is validated again."""
        budget = Budget(month="2024-01", total_budget=Decimal("100"))
        with pytest.raises(ValidationError):
            BudgetUpdate(month="January")
        updated = apply_update(budget, BudgetUpdate(total_budget=Decimal("250")))
        assert updated.total_budget == Decimal("250")

    def test_loan_update_cannot_set_status(self):
        """Test that status is not part of the loan update command."""
        assert "status" not in LoanUpdate.model_fields
        assert "payments" not in LoanUpdate.model_fields


class TestReceiptModels:
    """Tests for receipt guesses."""

    def test_guess_to_draft_prefers_explicit_date(self):
        """Test the draft date order: explicit, purchase date, today."""
        guess = ReceiptGuess(
            amount=Decimal("8.40"),
            description="Corner Cafe",
            category="Food & Dining",
            purchase_date=date(2024, 3, 1),
        )
        assert guess.to_draft(on_date=date(2024, 3, 2)).transaction_date == date(2024, 3, 2)
        assert guess.to_draft().transaction_date == date(2024, 3, 1)

    def test_guess_to_draft_carries_attachment(self):
        """Test that the attachment becomes the receipt fields of the draft."""
        guess = ReceiptGuess(
            amount=Decimal("5"),
            attachment=ReceiptAttachment(
                data_url="data:image/jpeg;base64,AAAA",
                file_name="r.jpg",
                width=10,
                height=20,
                size_bytes=3,
            ),
        )
        draft = guess.to_draft()
        assert draft.type == TransactionType.EXPENSE
        assert draft.receipt_image == "data:image/jpeg;base64,AAAA"
        assert draft.receipt_file_name == "r.jpg"

    def test_guess_confidence_bounds(self):
        """Test confidence must be between 0 and 1."""
        with pytest.raises(ValidationError):
            ReceiptGuess(confidence=1.5)


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            description="Transaction added",
        )
        assert event.event_type == AuditEventType.TRANSACTION_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.transaction_added(
            transaction_id="t1",
            transaction_type="expense",
            amount="300",
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "transaction_added"
        assert log_dict["entity_id"] == "t1"
        assert log_dict["details"]["amount"] == "300"

    def test_budget_saved_with_replacement(self):
        """Test that replacing a month's budget is its own event type."""
        event = AuditEventBuilder.budget_saved("b2", "2024-01", replaced_id="b1")
        assert event.event_type == AuditEventType.BUDGET_REPLACED
        assert event.details["replaced_id"] == "b1"

        event = AuditEventBuilder.budget_saved("b3", "2024-02")
        assert event.event_type == AuditEventType.BUDGET_SAVED

    def test_save_failed_is_error(self):
        """Test that storage failures are logged as errors."""
        event = AuditEventBuilder.save_failed("loans", "disk full")
        assert event.event_type == AuditEventType.SAVE_FAILED
        assert event.severity == AuditSeverity.ERROR


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
