"""
Receipt Text Heuristics

Turns raw receipt text into a ReceiptGuess.

DESIGN DECISION: We use simple keyword and regex matching rather than ML:
1. Transparent to the user
2. Easy to debug
3. The user reviews the draft anyway
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from finance_tracker.models.receipt import (
    DEFAULT_RECEIPT_CATEGORY,
    DEFAULT_RECEIPT_DESCRIPTION,
    ReceiptGuess,
)


# Optional currency symbol, then an amount with two decimals or a whole number
AMOUNT_PATTERN = re.compile(r"[\$€£¥₹]?\s*(\d+[.,]\d{2}|\d+)")

# First match wins, so order matters
CATEGORY_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("Food & Dining", ("restaurant", "cafe", "food")),
    ("Transportation", ("gas", "fuel", "transport")),
    ("Shopping", ("grocery", "market", "store")),
    ("Healthcare", ("pharmacy", "medical", "hospital")),
    ("Bills & Utilities", ("electric", "water", "utility")),
]

DESCRIPTION_LINES = 3


def parse_amount(token: str) -> Optional[Decimal]:
    """Parse "12.50", "12,50" or "12" into a Decimal."""
    try:
        return Decimal(token.replace(",", "."))
    except InvalidOperation:
        return None


def extract_amount(text: str) -> Decimal:
    """
    The last amount-looking token on the receipt.

    Totals usually come last, after the line items.
    """
    matches = AMOUNT_PATTERN.findall(text)
    if not matches:
        return Decimal("0")
    return parse_amount(matches[-1]) or Decimal("0")


def extract_description(text: str) -> str:
    """The first few non-empty lines (usually the merchant), punctuation removed."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    head = " ".join(lines[:DESCRIPTION_LINES])
    cleaned = " ".join(re.sub(r"[^\w\s]", " ", head).split())
    return cleaned or DEFAULT_RECEIPT_DESCRIPTION


def guess_category(text: str) -> str:
    lowered = text.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return DEFAULT_RECEIPT_CATEGORY


def guess_from_text(text: str) -> ReceiptGuess:
    """
    Make a best-effort guess of the transaction a receipt describes.

    Receipts are always treated as expenses.
    """
    text = text or ""
    return ReceiptGuess(
        amount=extract_amount(text),
        description=extract_description(text),
        category=guess_category(text),
        raw_text=text or None,
    )
