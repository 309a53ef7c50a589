"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the summary engines and tracker unaware of where data lives
2. Use in-memory storage for testing
3. Swap the local JSON files for another backend later

The interface is intentionally simple: each collection is loaded and saved
as a whole list, exactly like the original client-side storage.
"""

from abc import ABC, abstractmethod

from finance_tracker.models.records import Budget, Loan, Transaction


class FinanceStorageInterface(ABC):
    """
    Abstract interface for the three record collections.

    Loading never raises for unreadable data: implementations log the
    problem and fall back to an empty list (or skip the bad records).
    Saving raises StorageError when the collection could not be written.
    """

    @abstractmethod
    def load_transactions(self) -> list[Transaction]:
        """Load all transactions, in stored order."""
        pass

    @abstractmethod
    def save_transactions(self, transactions: list[Transaction]) -> None:
        """
        Replace the stored transactions.

        Raises:
            StorageError: If save fails
        """
        pass

    @abstractmethod
    def load_budgets(self) -> list[Budget]:
        """Load all budgets. A missing categoryBudgets loads as []."""
        pass

    @abstractmethod
    def save_budgets(self, budgets: list[Budget]) -> None:
        """
        Replace the stored budgets.

        Raises:
            StorageError: If save fails
        """
        pass

    @abstractmethod
    def load_loans(self) -> list[Loan]:
        """
        Load all loans with their payments.

        The stored status is returned as-is; callers must re-derive it.
        """
        pass

    @abstractmethod
    def save_loans(self, loans: list[Loan]) -> None:
        """
        Replace the stored loans.

        Raises:
            StorageError: If save fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Record not found."""
    pass
