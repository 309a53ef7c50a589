"""Tests for the storage backends."""

import json

import pytest
from datetime import date
from decimal import Decimal

from finance_tracker.models import (
    Budget,
    CategoryBudget,
    Loan,
    LoanPayment,
    LoanType,
    Transaction,
)
from finance_tracker.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    StorageError,
)


@pytest.fixture
def storage(tmp_path):
    return JsonFileStorage(data_dir=tmp_path)


def _transaction(**overrides):
    fields = dict(
        amount=Decimal("19.99"),
        category="Shopping",
        description="Umbrella",
        date=date(2024, 4, 2),
        type="expense",
    )
    fields.update(overrides)
    return Transaction(**fields)


class TestJsonFileStorage:
    """Tests for JsonFileStorage."""

    def test_missing_files_load_empty(self, storage):
        """Test a fresh directory has empty collections."""
        assert storage.load_transactions() == []
        assert storage.load_budgets() == []
        assert storage.load_loans() == []

    def test_transactions_persist(self, storage):
        """Test saved transactions load back equal."""
        transaction = _transaction()
        storage.save_transactions([transaction])

        loaded = storage.load_transactions()
        assert len(loaded) == 1
        assert loaded[0].id == transaction.id
        assert loaded[0].amount == Decimal("19.99")
        assert loaded[0].transaction_date == date(2024, 4, 2)
        assert loaded[0].created_at == transaction.created_at

    def test_stored_shape_is_camel_case(self, storage):
        """Test the file holds a JSON list of camelCase objects."""
        storage.save_transactions([_transaction(id="t1")])

        raw = json.loads(storage.path_for("transactions").read_text(encoding="utf-8"))
        assert isinstance(raw, list)
        assert raw[0]["id"] == "t1"
        assert raw[0]["date"] == "2024-04-02"
        assert raw[0]["amount"] == 19.99
        assert "createdAt" in raw[0]

    def test_loans_with_payments_persist(self, storage):
        """Test loans keep their payments in order."""
        loan = Loan(
            loan_type=LoanType.GIVEN,
            borrower_name="Jordan",
            amount=Decimal("300"),
            loan_date=date(2024, 1, 1),
            due_date=date(2024, 3, 1),
            payments=[
                LoanPayment(amount=Decimal("100"), payment_date=date(2024, 1, 15)),
                LoanPayment(amount=Decimal("50"), payment_date=date(2024, 2, 1)),
            ],
        )
        storage.save_loans([loan])

        loaded = storage.load_loans()
        assert [p.amount for p in loaded[0].payments] == [Decimal("100"), Decimal("50")]
        raw = json.loads(storage.path_for("loans").read_text(encoding="utf-8"))
        assert raw[0]["loanType"] == "given"
        assert raw[0]["payments"][0]["paymentDate"] == "2024-01-15"

    def test_budget_without_category_budgets(self, storage):
        """Test an older budget record without categoryBudgets still loads."""
        storage.path_for("budgets").write_text(
            json.dumps([{"id": "b1", "month": "2024-01", "totalBudget": 500,
                         "createdAt": "2024-01-01T00:00:00.000Z"}]),
            encoding="utf-8",
        )
        budgets = storage.load_budgets()
        assert budgets[0].total_budget == Decimal("500")
        assert budgets[0].category_budgets == []

    def test_corrupt_file_loads_empty(self, storage):
        """Test unparseable JSON degrades to an empty collection."""
        storage.path_for("transactions").write_text("{not json", encoding="utf-8")
        assert storage.load_transactions() == []

    def test_non_list_loads_empty(self, storage):
        """Test a JSON document that is not a list degrades to empty."""
        storage.path_for("loans").write_text('{"loans": []}', encoding="utf-8")
        assert storage.load_loans() == []

    def test_malformed_record_skipped(self, storage):
        """Test one bad record does not discard the rest of the collection."""
        good = _transaction(id="good").to_storage_dict()
        bad = dict(good, id="bad", date="not-a-date")
        negative = dict(good, id="negative", amount=-5)
        storage.path_for("transactions").write_text(
            json.dumps([good, bad, negative]), encoding="utf-8"
        )
        assert [t.id for t in storage.load_transactions()] == ["good"]

    def test_save_creates_data_dir(self, tmp_path):
        """Test the data directory is created on first save."""
        storage = JsonFileStorage(data_dir=tmp_path / "nested" / "data")
        storage.save_budgets([Budget(
            month="2024-01",
            total_budget=Decimal("100"),
            category_budgets=[CategoryBudget(category="Travel", budget_amount=Decimal("40"))],
        )])
        assert storage.path_for("budgets").exists()
        assert not storage.path_for("budgets").with_name("budgets.json.tmp").exists()

    def test_save_failure_raises_storage_error(self, tmp_path):
        """Test a write that cannot succeed raises StorageError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        storage = JsonFileStorage(data_dir=blocker)

        with pytest.raises(StorageError, match="Failed to save transactions"):
            storage.save_transactions([_transaction()])


class TestInMemoryStorage:
    """Tests for InMemoryStorage."""

    def test_round_trip_through_stored_form(self):
        """Test records are kept in their stored form."""
        storage = InMemoryStorage()
        storage.save_transactions([_transaction(id="t1")])

        assert storage.raw["transactions"][0]["id"] == "t1"
        assert storage.load_transactions()[0].id == "t1"
        assert storage.save_count == 1

    def test_seeded_with_legacy_records(self):
        """Test timestamp ids and missing optional lists load unchanged."""
        storage = InMemoryStorage(loans=[{
            "id": "1704067200000",
            "loanType": "borrowed",
            "borrowerName": "Sam",
            "amount": 200,
            "interestRate": 0,
            "loanDate": "2024-01-01",
            "dueDate": "2024-02-01",
            "status": "active",
            "createdAt": "2024-01-01T00:00:00.000Z",
        }])
        loans = storage.load_loans()
        assert loans[0].id == "1704067200000"
        assert loans[0].payments == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
