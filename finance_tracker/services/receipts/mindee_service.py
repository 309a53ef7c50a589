"""
Receipt OCR Service using Mindee

DESIGN DECISION: We use Mindee's receipt model because:
1. Specialized for receipts (merchant, total, purchase date)
2. Returns STRUCTURED data with confidence scores
3. Its purchase category maps onto our expense categories

Structured fields win when Mindee found them; the text heuristics fill
in whatever it missed.

CRITICAL: The result is a GUESS. It only pre-fills a transaction draft.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import structlog
from mindee import Client, PredictResponse
from mindee.product import ReceiptV5
from tenacity import retry, stop_after_attempt, wait_exponential

from finance_tracker.config import get_settings
from finance_tracker.models.receipt import ReceiptGuess
from finance_tracker.services.receipts.heuristics import guess_from_text
from finance_tracker.services.receipts.image import ReceiptError


logger = structlog.get_logger(__name__)

# Mindee purchase categories -> our expense categories
MINDEE_CATEGORY_MAP = {
    "food": "Food & Dining",
    "gasoline": "Transportation",
    "transport": "Transportation",
    "parking": "Transportation",
    "toll": "Transportation",
    "accommodation": "Travel",
    "telecom": "Bills & Utilities",
}


class ReceiptScanError(ReceiptError):
    """Failed to extract anything from the receipt."""
    pass


def _field_value(prediction: Any, name: str) -> Any:
    field = getattr(prediction, name, None)
    return getattr(field, "value", None) if field is not None else None


def _field_confidence(prediction: Any, name: str) -> Optional[float]:
    field = getattr(prediction, name, None)
    if field is None or getattr(field, "value", None) is None:
        return None
    return getattr(field, "confidence", None)


def _safe_decimal(value) -> Optional[Decimal]:
    """Safely convert a value to a non-negative Decimal."""
    if value is None:
        return None
    try:
        amount = Decimal(str(value)).quantize(Decimal("0.01"))
    except (InvalidOperation, TypeError, ValueError):
        return None
    return amount if amount >= 0 else None


def _safe_date(value) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        return None


class MindeeReceiptService:
    """
    Receipt scanner backed by the Mindee receipt API.

    IMPORTANT BOUNDARIES:
    1. This service ONLY extracts data - it never creates transactions
    2. Failures raise ReceiptScanError; the caller decides what to show
    """

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    def _get_client(self) -> Client:
        """Get or create Mindee client."""
        if self._client is None:
            self._client = Client(api_key=get_settings().mindee.api_key)
        return self._client

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _predict(self, image_bytes: bytes, filename: str) -> Any:
        client = self._get_client()
        input_doc = client.source_from_bytes(image_bytes, filename)
        response: PredictResponse = client.parse(ReceiptV5, input_doc)
        return response.document.inference.prediction

    def _prediction_text(self, prediction: Any) -> str:
        """Rebuild receipt-like text for the keyword heuristics."""
        parts = []
        for name in ("supplier_name", "supplier_address"):
            value = _field_value(prediction, name)
            if value:
                parts.append(str(value))
        for item in getattr(prediction, "line_items", None) or []:
            description = getattr(item, "description", None)
            if description:
                parts.append(str(description))
        total = _field_value(prediction, "total_amount")
        if total is not None:
            parts.append(f"Total {total}")
        return "\n".join(parts)

    def scan(self, image_bytes: bytes, filename: str) -> ReceiptGuess:
        """
        Extract a transaction guess from a receipt image.

        Args:
            image_bytes: The (normalized) receipt image
            filename: Original file name, passed through to Mindee

        Raises:
            ReceiptScanError: If the API call fails after retries
        """
        try:
            prediction = self._predict(image_bytes, filename)
        except Exception as e:
            logger.warning("receipt_scan_failed", filename=filename, error=str(e))
            raise ReceiptScanError(f"Failed to scan receipt: {e}") from e

        text = self._prediction_text(prediction)
        guess = guess_from_text(text)

        total = _safe_decimal(_field_value(prediction, "total_amount"))
        if total is not None:
            guess.amount = total

        supplier = _field_value(prediction, "supplier_name")
        if supplier:
            guess.description = str(supplier).strip()[:200]

        mindee_category = _field_value(prediction, "category")
        if mindee_category in MINDEE_CATEGORY_MAP:
            guess.category = MINDEE_CATEGORY_MAP[mindee_category]

        guess.purchase_date = _safe_date(_field_value(prediction, "date"))

        confidences = [
            c for c in (
                _field_confidence(prediction, name)
                for name in ("total_amount", "date", "supplier_name")
            )
            if c is not None
        ]
        guess.confidence = sum(confidences) / len(confidences) if confidences else 0.0

        logger.info(
            "receipt_scanned",
            filename=filename,
            category=guess.category,
            confidence=guess.confidence,
        )
        return guess
