"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
All records flowing through the system must conform to these schemas.
"""

from finance_tracker.models.records import (
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    SALARY_CATEGORY,
    Budget,
    CategoryBudget,
    Loan,
    LoanPayment,
    LoanStatus,
    LoanType,
    Transaction,
    TransactionType,
    month_key,
    new_record_id,
    utc_now,
    utc_today,
)
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
from finance_tracker.models.summaries import (
    BudgetStatus,
    CategoryBudgetStatus,
    CategorySummary,
    Dashboard,
    FinancialSummary,
    LoanSummary,
    MonthComparison,
    MonthlySummary,
)
from finance_tracker.models.receipt import ReceiptAttachment, ReceiptGuess
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Records
    "EXPENSE_CATEGORIES",
    "INCOME_CATEGORIES",
    "SALARY_CATEGORY",
    "Budget",
    "CategoryBudget",
    "Loan",
    "LoanPayment",
    "LoanStatus",
    "LoanType",
    "Transaction",
    "TransactionType",
    "month_key",
    "new_record_id",
    "utc_now",
    "utc_today",
    # Commands
    "BudgetDraft",
    "BudgetUpdate",
    "LoanDraft",
    "LoanUpdate",
    "PaymentDraft",
    "TransactionDraft",
    "TransactionUpdate",
    "apply_update",
    # Summaries
    "BudgetStatus",
    "CategoryBudgetStatus",
    "CategorySummary",
    "Dashboard",
    "FinancialSummary",
    "LoanSummary",
    "MonthComparison",
    "MonthlySummary",
    # Receipts
    "ReceiptAttachment",
    "ReceiptGuess",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
