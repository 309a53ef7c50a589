"""
In-Memory Storage

Keeps each collection in its serialized (stored) form, so records go
through the same dump/validate cycle as with the file backend.
Useful for tests and throwaway sessions.
"""

from typing import Optional

from finance_tracker.models.records import Budget, Loan, Transaction
from finance_tracker.services.storage.codec import dump_records, parse_records
from finance_tracker.services.storage.interface import FinanceStorageInterface


class InMemoryStorage(FinanceStorageInterface):
    """Storage backed by plain lists of dicts."""

    def __init__(
        self,
        transactions: Optional[list[dict]] = None,
        budgets: Optional[list[dict]] = None,
        loans: Optional[list[dict]] = None,
    ):
        self.raw: dict[str, list[dict]] = {
            "transactions": list(transactions or []),
            "budgets": list(budgets or []),
            "loans": list(loans or []),
        }
        self.save_count = 0

    def load_transactions(self) -> list[Transaction]:
        return parse_records(self.raw["transactions"], Transaction, "transactions")

    def save_transactions(self, transactions: list[Transaction]) -> None:
        self.raw["transactions"] = dump_records(transactions)
        self.save_count += 1

    def load_budgets(self) -> list[Budget]:
        return parse_records(self.raw["budgets"], Budget, "budgets")

    def save_budgets(self, budgets: list[Budget]) -> None:
        self.raw["budgets"] = dump_records(budgets)
        self.save_count += 1

    def load_loans(self) -> list[Loan]:
        return parse_records(self.raw["loans"], Loan, "loans")

    def save_loans(self, loans: list[Loan]) -> None:
        self.raw["loans"] = dump_records(loans)
        self.save_count += 1
