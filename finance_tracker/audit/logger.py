"""
Audit Logger

DESIGN DECISION: Every mutation of the tracked records is logged.
This provides:
1. Complete traceability
2. Debugging capability when storage fails
3. A history of changes the user can review

The audit logger:
- Writes structured JSON logs through structlog
- Keeps a bounded in-memory history of recent events
- Is optional everywhere it is accepted; callers work without one
"""

import logging
from collections import deque
from typing import Optional

import structlog

from finance_tracker.config import get_settings
from finance_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Route structlog output through the stdlib root logger.

    Args:
        level: Minimum level name; defaults to the configured log_level
    """
    level = level or get_settings().app.log_level
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))
    logging.getLogger().setLevel(getattr(logging, level.upper()))


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An in-memory history (for display)
    """

    def __init__(self, history_size: Optional[int] = None):
        """
        Initialize audit logger.

        Args:
            history_size: How many events to keep in memory.
                          Defaults to the audit_history_size setting.
        """
        if history_size is None:
            history_size = get_settings().app.audit_history_size
        self._history: deque[AuditEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger("finance_tracker.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at its severity and remember it."""
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        self._history.append(event)

    def recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Most recent events, newest first."""
        return list(reversed(self._history))[:limit]

    def log_transaction_added(
        self,
        transaction_id: str,
        transaction_type: str,
        amount: str,
    ) -> None:
        self.log(AuditEventBuilder.transaction_added(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
        ))

    def log_transaction_updated(self, transaction_id: str, fields: list[str]) -> None:
        self.log(AuditEventBuilder.transaction_updated(transaction_id, fields))

    def log_transaction_deleted(self, transaction_id: str) -> None:
        self.log(AuditEventBuilder.transaction_deleted(transaction_id))

    def log_budget_saved(
        self,
        budget_id: str,
        month: str,
        replaced_id: Optional[str] = None,
    ) -> None:
        self.log(AuditEventBuilder.budget_saved(budget_id, month, replaced_id))

    def log_budget_updated(self, budget_id: str, fields: list[str]) -> None:
        self.log(AuditEventBuilder.budget_updated(budget_id, fields))

    def log_budget_deleted(self, budget_id: str) -> None:
        self.log(AuditEventBuilder.budget_deleted(budget_id))

    def log_loan_added(
        self,
        loan_id: str,
        loan_type: str,
        amount: str,
        status: str,
    ) -> None:
        self.log(AuditEventBuilder.loan_added(loan_id, loan_type, amount, status))

    def log_loan_updated(self, loan_id: str, fields: list[str]) -> None:
        self.log(AuditEventBuilder.loan_updated(loan_id, fields))

    def log_loan_deleted(self, loan_id: str) -> None:
        self.log(AuditEventBuilder.loan_deleted(loan_id))

    def log_loan_payment_added(
        self,
        loan_id: str,
        payment_id: str,
        amount: str,
    ) -> None:
        self.log(AuditEventBuilder.loan_payment_added(loan_id, payment_id, amount))

    def log_loan_status_changed(
        self,
        loan_id: str,
        old_status: str,
        new_status: str,
    ) -> None:
        self.log(AuditEventBuilder.loan_status_changed(loan_id, old_status, new_status))

    def log_data_loaded(self, transactions: int, budgets: int, loans: int) -> None:
        self.log(AuditEventBuilder.data_loaded(transactions, budgets, loans))

    def log_save_failed(self, collection: str, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(collection, error_message))

    def log_receipt_scanned(self, file_name: str, category: str, amount: str) -> None:
        self.log(AuditEventBuilder.receipt_scanned(file_name, category, amount))

    def log_receipt_scan_failed(self, file_name: str, error_message: str) -> None:
        self.log(AuditEventBuilder.receipt_scan_failed(file_name, error_message))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.log(AuditEventBuilder.system_error(error_type, error_message, details))
