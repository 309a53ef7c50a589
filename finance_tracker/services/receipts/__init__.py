"""
Receipt Capture Services

Image normalization (Pillow), OCR (Mindee) and plain-text heuristics.
Nothing here saves a transaction: the output is a ReceiptGuess that the
user reviews as a draft.
"""

from finance_tracker.services.receipts.heuristics import guess_from_text
from finance_tracker.services.receipts.image import (
    ReceiptError,
    ReceiptImageError,
    ReceiptImageService,
)
from finance_tracker.services.receipts.mindee_service import (
    MindeeReceiptService,
    ReceiptScanError,
)

__all__ = [
    "guess_from_text",
    "MindeeReceiptService",
    "ReceiptImageService",
    # Exceptions
    "ReceiptError",
    "ReceiptImageError",
    "ReceiptScanError",
]
