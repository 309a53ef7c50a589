"""
Finance Tracker Orchestrator

This module ties together storage, the summary engines and auditing, and
defines the flows for:
1. Record mutations (draft/update → validate → persist → audit)
2. Dashboard snapshots (state → every summary view)
3. Receipt capture (image → normalize → OCR → guess)

DESIGN DECISION: The tracker owns the application state explicitly.
- Engines never hold state; they get a snapshot and return new records
- Every mutation builds the new collection first, persists it, and only
  then replaces the in-memory list
- A failed save leaves the state untouched, is audited, and re-raised

Loan status is never trusted from input: it is derived again whenever a
loan is loaded, created, edited or paid.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Callable, Optional

import structlog
from pydantic import BaseModel, Field

from finance_tracker.audit import AuditLogger, configure_logging
from finance_tracker.config import get_settings
from finance_tracker.models.commands import (
    BudgetDraft,
    BudgetUpdate,
    LoanDraft,
    LoanUpdate,
    PaymentDraft,
    TransactionDraft,
    TransactionUpdate,
    apply_update,
)
from finance_tracker.models.receipt import ReceiptGuess
from finance_tracker.models.records import (
    Budget,
    Loan,
    LoanPayment,
    Transaction,
    utc_now,
)
from finance_tracker.models.summaries import Dashboard
from finance_tracker.queries import recent_transactions
from finance_tracker.services.receipts import (
    MindeeReceiptService,
    ReceiptImageService,
    ReceiptScanError,
)
from finance_tracker.services.storage import (
    FinanceStorageInterface,
    JsonFileStorage,
    NotFoundError,
    StorageError,
)
from finance_tracker.summaries import (
    month_over_month,
    summarize_budgets,
    summarize_finances,
    summarize_loans,
    summarize_monthly,
    with_derived_status,
)


logger = structlog.get_logger(__name__)


class FinanceState(BaseModel):
    """The three collections as currently held by the tracker."""

    transactions: list[Transaction] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)
    loans: list[Loan] = Field(default_factory=list)


def _find_index(records: list, record_id: str) -> Optional[int]:
    for index, record in enumerate(records):
        if record.id == record_id:
            return index
    return None


def _changed_fields(update: BaseModel) -> list[str]:
    return sorted(update.model_dump(exclude_unset=True))


class FinanceTracker:
    """
    Owns the record collections and keeps storage in sync with them.

    New records are prepended, so collections read newest first.
    The tracker is not thread-safe; callers serialize access.
    """

    def __init__(
        self,
        storage: FinanceStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
        recent_limit: Optional[int] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger
        self._clock = clock or utc_now
        if recent_limit is None:
            recent_limit = get_settings().app.recent_transactions_limit
        self._recent_limit = recent_limit
        self.state = FinanceState()

    def _today(self) -> date:
        return self._clock().date()

    def _save(self, collection: str, records: list) -> None:
        savers = {
            "transactions": self._storage.save_transactions,
            "budgets": self._storage.save_budgets,
            "loans": self._storage.save_loans,
        }
        try:
            savers[collection](records)
        except StorageError as e:
            logger.error("save_failed", collection=collection, error=str(e))
            if self._audit_logger:
                self._audit_logger.log_save_failed(collection, str(e))
            raise

    def _derive(self, loan: Loan) -> Loan:
        """Re-derive a loan's status and audit the change, if any."""
        derived = with_derived_status(loan, self._today())
        if derived.status != loan.status and self._audit_logger:
            self._audit_logger.log_loan_status_changed(
                loan_id=loan.id,
                old_status=loan.status.value,
                new_status=derived.status.value,
            )
        return derived

    # =========================================================================
    # LOADING
    # =========================================================================

    def load(self) -> FinanceState:
        """
        Read every collection from storage.

        Loan statuses are re-derived; the stored value is not trusted.
        Nothing is written back until the next loan mutation.
        """
        transactions = self._storage.load_transactions()
        budgets = self._storage.load_budgets()
        loans = [self._derive(loan) for loan in self._storage.load_loans()]

        self.state = FinanceState(
            transactions=transactions,
            budgets=budgets,
            loans=loans,
        )

        logger.info(
            "data_loaded",
            transactions=len(transactions),
            budgets=len(budgets),
            loans=len(loans),
        )
        if self._audit_logger:
            self._audit_logger.log_data_loaded(len(transactions), len(budgets), len(loans))

        return self.state

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    def add_transaction(self, draft: TransactionDraft) -> Transaction:
        transaction = draft.to_record()
        transactions = [transaction, *self.state.transactions]

        self._save("transactions", transactions)
        self.state.transactions = transactions

        if self._audit_logger:
            self._audit_logger.log_transaction_added(
                transaction_id=transaction.id,
                transaction_type=transaction.type.value,
                amount=str(transaction.amount),
            )
        return transaction

    def update_transaction(
        self,
        transaction_id: str,
        update: TransactionUpdate,
    ) -> Transaction:
        """
        Apply a partial edit to a transaction.

        Raises:
            NotFoundError: If no transaction has this id
            pydantic.ValidationError: If the edited record is invalid
        """
        index = _find_index(self.state.transactions, transaction_id)
        if index is None:
            raise NotFoundError(f"Transaction {transaction_id} not found")

        updated = apply_update(self.state.transactions[index], update)
        transactions = list(self.state.transactions)
        transactions[index] = updated

        self._save("transactions", transactions)
        self.state.transactions = transactions

        if self._audit_logger:
            self._audit_logger.log_transaction_updated(transaction_id, _changed_fields(update))
        return updated

    def delete_transaction(self, transaction_id: str) -> bool:
        """Remove a transaction. Returns False if the id is unknown."""
        transactions = [t for t in self.state.transactions if t.id != transaction_id]
        if len(transactions) == len(self.state.transactions):
            return False

        self._save("transactions", transactions)
        self.state.transactions = transactions

        if self._audit_logger:
            self._audit_logger.log_transaction_deleted(transaction_id)
        return True

    # =========================================================================
    # BUDGETS
    # =========================================================================

    def add_budget(self, draft: BudgetDraft) -> Budget:
        """
        Save the budget for a month.

        There is at most one budget per month: an existing budget for the
        same month is replaced by the new one.
        """
        budget = draft.to_record()
        replaced = next((b for b in self.state.budgets if b.month == budget.month), None)
        budgets = [budget, *(b for b in self.state.budgets if b.month != budget.month)]

        self._save("budgets", budgets)
        self.state.budgets = budgets

        if self._audit_logger:
            self._audit_logger.log_budget_saved(
                budget_id=budget.id,
                month=budget.month,
                replaced_id=replaced.id if replaced else None,
            )
        return budget

    def update_budget(self, budget_id: str, update: BudgetUpdate) -> Budget:
        """
        Apply a partial edit to a budget.

        Moving a budget onto a month that already has one replaces the
        other budget, as add_budget does.

        Raises:
            NotFoundError: If no budget has this id
        """
        index = _find_index(self.state.budgets, budget_id)
        if index is None:
            raise NotFoundError(f"Budget {budget_id} not found")

        updated = apply_update(self.state.budgets[index], update)
        replaced = next(
            (b for b in self.state.budgets if b.id != budget_id and b.month == updated.month),
            None,
        )
        budgets = [
            updated if b.id == budget_id else b
            for b in self.state.budgets
            if b.id == budget_id or b.month != updated.month
        ]

        self._save("budgets", budgets)
        self.state.budgets = budgets

        if self._audit_logger:
            self._audit_logger.log_budget_updated(budget_id, _changed_fields(update))
            if replaced:
                self._audit_logger.log_budget_saved(
                    budget_id=budget_id,
                    month=updated.month,
                    replaced_id=replaced.id,
                )
        return updated

    def delete_budget(self, budget_id: str) -> bool:
        budgets = [b for b in self.state.budgets if b.id != budget_id]
        if len(budgets) == len(self.state.budgets):
            return False

        self._save("budgets", budgets)
        self.state.budgets = budgets

        if self._audit_logger:
            self._audit_logger.log_budget_deleted(budget_id)
        return True

    # =========================================================================
    # LOANS
    # =========================================================================

    def add_loan(self, draft: LoanDraft) -> Loan:
        """Create a loan with no payments and a freshly derived status."""
        loan = with_derived_status(draft.to_record(), self._today())
        loans = [loan, *self.state.loans]

        self._save("loans", loans)
        self.state.loans = loans

        if self._audit_logger:
            self._audit_logger.log_loan_added(
                loan_id=loan.id,
                loan_type=loan.loan_type.value,
                amount=str(loan.amount),
                status=loan.status.value,
            )
        return loan

    def update_loan(self, loan_id: str, update: LoanUpdate) -> Loan:
        """
        Apply a partial edit to a loan and derive its status again.

        Raises:
            NotFoundError: If no loan has this id
        """
        index = _find_index(self.state.loans, loan_id)
        if index is None:
            raise NotFoundError(f"Loan {loan_id} not found")

        updated = self._derive(apply_update(self.state.loans[index], update))
        loans = list(self.state.loans)
        loans[index] = updated

        self._save("loans", loans)
        self.state.loans = loans

        if self._audit_logger:
            self._audit_logger.log_loan_updated(loan_id, _changed_fields(update))
        return updated

    def delete_loan(self, loan_id: str) -> bool:
        loans = [loan for loan in self.state.loans if loan.id != loan_id]
        if len(loans) == len(self.state.loans):
            return False

        self._save("loans", loans)
        self.state.loans = loans

        if self._audit_logger:
            self._audit_logger.log_loan_deleted(loan_id)
        return True

    def add_loan_payment(self, loan_id: str, draft: PaymentDraft) -> Loan:
        """
        Append a payment to a loan and derive its status again.

        Overpayment is accepted; it is what interest is counted from.

        Raises:
            NotFoundError: If no loan has this id
        """
        index = _find_index(self.state.loans, loan_id)
        if index is None:
            raise NotFoundError(f"Loan {loan_id} not found")

        loan = self.state.loans[index]
        payment: LoanPayment = draft.to_record()
        updated = self._derive(
            loan.model_copy(update={"payments": [*loan.payments, payment]})
        )
        loans = list(self.state.loans)
        loans[index] = updated

        self._save("loans", loans)
        self.state.loans = loans

        if self._audit_logger:
            self._audit_logger.log_loan_payment_added(
                loan_id=loan_id,
                payment_id=payment.id,
                amount=str(payment.amount),
            )
        return updated

    # =========================================================================
    # DASHBOARD
    # =========================================================================

    def dashboard(self) -> Dashboard:
        """Recompute every summary view from the current state."""
        state = self.state
        monthly = summarize_monthly(state.transactions)

        return Dashboard(
            summary=summarize_finances(state.transactions),
            monthly_summaries=monthly,
            month_comparison=month_over_month(monthly),
            budget_statuses=summarize_budgets(state.transactions, state.budgets),
            loan_summary=summarize_loans(state.loans, now=self._clock()),
            recent_transactions=recent_transactions(state.transactions, self._recent_limit),
        )


class ReceiptCaptureFlow:
    """
    Orchestrates receipt capture.

    Flow:
    1. Validate and normalize the upload (Pillow)
    2. Scan the normalized image (Mindee)
    3. Return a ReceiptGuess carrying the attachment

    The flow NEVER saves a transaction. The caller turns the guess into a
    draft with ReceiptGuess.to_draft() and lets the user review it.
    """

    def __init__(
        self,
        image_service: Optional[ReceiptImageService] = None,
        scanner: Optional[MindeeReceiptService] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._image_service = image_service or ReceiptImageService()
        self._scanner = scanner or MindeeReceiptService()
        self._audit_logger = audit_logger

    def capture(self, image_bytes: bytes, filename: str, mime_type: str) -> ReceiptGuess:
        """
        Raises:
            ReceiptImageError: If the upload is not a usable image
            ReceiptScanError: If OCR fails
        """
        attachment, jpeg_bytes = self._image_service.prepare(image_bytes, filename, mime_type)

        try:
            guess = self._scanner.scan(jpeg_bytes, attachment.file_name)
        except ReceiptScanError as e:
            if self._audit_logger:
                self._audit_logger.log_receipt_scan_failed(attachment.file_name, str(e))
            raise

        guess.attachment = attachment

        if self._audit_logger:
            self._audit_logger.log_receipt_scanned(
                file_name=attachment.file_name,
                category=guess.category,
                amount=str(guess.amount),
            )
        return guess


def create_tracker(data_dir: Optional[Path] = None) -> FinanceTracker:
    """
    Factory function to create a tracker over the local JSON files.

    Args:
        data_dir: Directory holding the collection files.
                  Defaults to the configured storage data_dir.

    Returns:
        A tracker with its data already loaded
    """
    configure_logging()
    audit_logger = AuditLogger()
    tracker = FinanceTracker(
        storage=JsonFileStorage(data_dir=data_dir),
        audit_logger=audit_logger,
    )
    tracker.load()
    return tracker
