"""
Local JSON File Storage

DESIGN DECISION: Each collection lives in its own JSON file because:
1. The data stays on the user's machine (no server)
2. Files are human-readable and easy to back up
3. The stored shape matches the original client-side schema

TRADEOFFS:
- Whole collections are rewritten on every save (fine for personal use)
- No transactions across collections (each file is replaced atomically)
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_tracker.config import StorageSettings, get_settings
from finance_tracker.models.records import Budget, Loan, RecordModel, Transaction
from finance_tracker.services.storage.codec import dump_records, parse_records
from finance_tracker.services.storage.interface import (
    FinanceStorageInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)


class JsonFileStorage(FinanceStorageInterface):
    """
    Stores transactions, budgets and loans as JSON lists on disk.

    Missing files load as empty collections. Writes go to a temporary
    file first and then replace the target, so a crash never leaves a
    half-written collection behind.
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        settings: Optional[StorageSettings] = None,
    ):
        settings = settings or get_settings().storage
        self._data_dir = Path(data_dir).expanduser() if data_dir else settings.data_dir
        self._paths = {
            "transactions": self._data_dir / settings.transactions_file,
            "budgets": self._data_dir / settings.budgets_file,
            "loans": self._data_dir / settings.loans_file,
        }

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, collection: str) -> Path:
        """File backing a collection ("transactions", "budgets" or "loans")."""
        return self._paths[collection]

    def _read(self, collection: str) -> Any:
        path = self._paths[collection]
        if not path.exists():
            return []
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(
                "collection_load_failed",
                collection=collection,
                path=str(path),
                error=str(e),
            )
            return []

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _write_atomic(self, path: Path, payload: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(path.name + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, path)

    def _write(self, collection: str, records: list[RecordModel]) -> None:
        path = self._paths[collection]
        payload = json.dumps(dump_records(records), indent=2, ensure_ascii=False)
        try:
            self._write_atomic(path, payload)
        except OSError as e:
            logger.error(
                "collection_save_failed",
                collection=collection,
                path=str(path),
                error=str(e),
            )
            raise StorageError(f"Failed to save {collection}: {e}") from e

        logger.debug("collection_saved", collection=collection, count=len(records))

    def load_transactions(self) -> list[Transaction]:
        return parse_records(self._read("transactions"), Transaction, "transactions")

    def save_transactions(self, transactions: list[Transaction]) -> None:
        self._write("transactions", transactions)

    def load_budgets(self) -> list[Budget]:
        return parse_records(self._read("budgets"), Budget, "budgets")

    def save_budgets(self, budgets: list[Budget]) -> None:
        self._write("budgets", budgets)

    def load_loans(self) -> list[Loan]:
        return parse_records(self._read("loans"), Loan, "loans")

    def save_loans(self, loans: list[Loan]) -> None:
        self._write("loans", loans)
