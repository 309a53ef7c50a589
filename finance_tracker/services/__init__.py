"""Services package."""

from finance_tracker.services.receipts import (
    MindeeReceiptService,
    ReceiptError,
    ReceiptImageError,
    ReceiptImageService,
    ReceiptScanError,
)
from finance_tracker.services.storage import (
    FinanceStorageInterface,
    InMemoryStorage,
    JsonFileStorage,
    NotFoundError,
    StorageError,
)

__all__ = [
    # Receipt services
    "MindeeReceiptService",
    "ReceiptError",
    "ReceiptImageError",
    "ReceiptImageService",
    "ReceiptScanError",
    # Storage services
    "FinanceStorageInterface",
    "InMemoryStorage",
    "JsonFileStorage",
    "NotFoundError",
    "StorageError",
]
