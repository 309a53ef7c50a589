"""
Audit Models for Finance Tracker

Every mutation of the tracked records is logged for audit purposes.
This provides:
1. Traceability of every add, edit and delete
2. Debugging information when storage fails
3. A history the user can review

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from finance_tracker.models.records import utc_now


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Budgets
    BUDGET_SAVED = "budget_saved"
    BUDGET_REPLACED = "budget_replaced"
    BUDGET_UPDATED = "budget_updated"
    BUDGET_DELETED = "budget_deleted"

    # Loans
    LOAN_ADDED = "loan_added"
    LOAN_UPDATED = "loan_updated"
    LOAN_DELETED = "loan_deleted"
    LOAN_PAYMENT_ADDED = "loan_payment_added"
    LOAN_STATUS_CHANGED = "loan_status_changed"

    # Persistence
    DATA_LOADED = "data_loaded"
    SAVE_FAILED = "save_failed"

    # Receipt capture
    RECEIPT_SCANNED = "receipt_scanned"
    RECEIPT_SCAN_FAILED = "receipt_scan_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what record is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'loan', 'budget')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the record this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    # Error information (if applicable)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction_id, "expense", "12.50")
        event = AuditEventBuilder.save_failed("loans", "disk full")
    """

    @staticmethod
    def transaction_added(
        transaction_id: str,
        transaction_type: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction added: {transaction_type} of {amount}",
            details={"type": transaction_type, "amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def transaction_updated(
        transaction_id: str,
        fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction updated",
            details={"fields": fields},
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted",
            is_user_action=True,
        )

    @staticmethod
    def budget_saved(
        budget_id: str,
        month: str,
        replaced_id: Optional[str] = None,
    ) -> AuditEvent:
        if replaced_id:
            return AuditEvent(
                event_type=AuditEventType.BUDGET_REPLACED,
                entity_type="budget",
                entity_id=budget_id,
                description=f"Budget for {month} replaced",
                details={"month": month, "replaced_id": replaced_id},
                is_user_action=True,
            )
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SAVED,
            entity_type="budget",
            entity_id=budget_id,
            description=f"Budget for {month} saved",
            details={"month": month},
            is_user_action=True,
        )

    @staticmethod
    def budget_updated(budget_id: str, fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_UPDATED,
            entity_type="budget",
            entity_id=budget_id,
            description="Budget updated",
            details={"fields": fields},
            is_user_action=True,
        )

    @staticmethod
    def budget_deleted(budget_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_DELETED,
            entity_type="budget",
            entity_id=budget_id,
            description="Budget deleted",
            is_user_action=True,
        )

    @staticmethod
    def loan_added(
        loan_id: str,
        loan_type: str,
        amount: str,
        status: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAN_ADDED,
            entity_type="loan",
            entity_id=loan_id,
            description=f"Loan added: {loan_type} {amount}",
            details={"loan_type": loan_type, "amount": amount, "status": status},
            is_user_action=True,
        )

    @staticmethod
    def loan_updated(loan_id: str, fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAN_UPDATED,
            entity_type="loan",
            entity_id=loan_id,
            description="Loan updated",
            details={"fields": fields},
            is_user_action=True,
        )

    @staticmethod
    def loan_deleted(loan_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAN_DELETED,
            entity_type="loan",
            entity_id=loan_id,
            description="Loan deleted",
            is_user_action=True,
        )

    @staticmethod
    def loan_payment_added(
        loan_id: str,
        payment_id: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAN_PAYMENT_ADDED,
            entity_type="loan",
            entity_id=loan_id,
            description=f"Payment of {amount} recorded",
            details={"payment_id": payment_id, "amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def loan_status_changed(
        loan_id: str,
        old_status: str,
        new_status: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAN_STATUS_CHANGED,
            entity_type="loan",
            entity_id=loan_id,
            description=f"Loan status changed from {old_status} to {new_status}",
            details={"old_status": old_status, "new_status": new_status},
        )

    @staticmethod
    def data_loaded(
        transactions: int,
        budgets: int,
        loans: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_LOADED,
            description="Collections loaded from storage",
            details={
                "transactions": transactions,
                "budgets": budgets,
                "loans": loans,
            },
        )

    @staticmethod
    def save_failed(collection: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type=collection,
            description=f"Failed to save {collection}",
            error_message=error_message,
        )

    @staticmethod
    def receipt_scanned(
        file_name: str,
        category: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECEIPT_SCANNED,
            entity_type="receipt",
            description=f"Receipt scanned: {file_name}",
            details={"category": category, "amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def receipt_scan_failed(file_name: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECEIPT_SCAN_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="receipt",
            description=f"Receipt scan failed: {file_name}",
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            details=details or {},
            error_message=error_message,
        )
