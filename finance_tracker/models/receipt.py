"""
Receipt Capture Models

CRITICAL: A ReceiptGuess is PROPOSED data, NOT verified.
It only pre-fills a transaction draft; the user still submits it.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import Field

from finance_tracker.models.commands import TransactionDraft
from finance_tracker.models.records import (
    Amount,
    RecordModel,
    TransactionType,
    utc_today,
)


DEFAULT_RECEIPT_DESCRIPTION = "Receipt Transaction"
DEFAULT_RECEIPT_CATEGORY = "Other Expenses"


class ReceiptAttachment(RecordModel):
    """A normalized receipt image ready to be stored on a transaction."""

    data_url: str = Field(
        ...,
        description="JPEG image as a base64 data URL"
    )
    file_name: str = Field(..., min_length=1)
    width: int = Field(ge=1)
    height: int = Field(ge=1)
    size_bytes: int = Field(ge=0)


class ReceiptGuess(RecordModel):
    """Best-effort transaction fields extracted from a receipt."""

    amount: Amount = Decimal("0")
    description: str = DEFAULT_RECEIPT_DESCRIPTION
    category: str = DEFAULT_RECEIPT_CATEGORY
    type: TransactionType = TransactionType.EXPENSE
    purchase_date: Optional[date] = None
    confidence: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="OCR confidence, when the extractor reports one"
    )
    raw_text: Optional[str] = Field(
        default=None,
        description="Text the guess was made from, for debugging"
    )
    attachment: Optional[ReceiptAttachment] = None

    def to_draft(self, on_date: Optional[date] = None) -> TransactionDraft:
        """
        Pre-fill a transaction draft from this guess.

        The date is, in order: on_date, the date read from the receipt,
        today.
        """
        return TransactionDraft(
            amount=self.amount,
            category=self.category,
            description=self.description,
            transaction_date=on_date or self.purchase_date or utc_today(),
            type=self.type,
            receipt_image=self.attachment.data_url if self.attachment else None,
            receipt_file_name=self.attachment.file_name if self.attachment else None,
        )
