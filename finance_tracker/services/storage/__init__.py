"""
Storage Services Package

Provides the abstract interface and concrete implementations for the
three record collections. Local JSON files are the default backend.
"""

from finance_tracker.services.storage.interface import (
    FinanceStorageInterface,
    NotFoundError,
    StorageError,
)
from finance_tracker.services.storage.json_file import JsonFileStorage
from finance_tracker.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "FinanceStorageInterface",
    # Exceptions
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
