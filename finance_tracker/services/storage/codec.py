"""
Record (de)serialization shared by the storage backends.

Stored collections are JSON lists of camelCase objects. A record that no
longer validates (bad date, negative amount, unknown enum value) is
skipped with a warning instead of failing the whole collection.
"""

from typing import Any, TypeVar

import structlog
from pydantic import ValidationError

from finance_tracker.models.records import RecordModel


RecordT = TypeVar("RecordT", bound=RecordModel)

logger = structlog.get_logger(__name__)


def parse_records(
    raw: Any,
    model: type[RecordT],
    collection: str,
) -> list[RecordT]:
    """Validate raw stored items into records, skipping malformed ones."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.error(
            "collection_not_a_list",
            collection=collection,
            found=type(raw).__name__,
        )
        return []

    records = []
    for index, item in enumerate(raw):
        try:
            records.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(
                "malformed_record_skipped",
                collection=collection,
                index=index,
                errors=e.error_count(),
                error=str(e),
            )
    return records


def dump_records(records: list[RecordModel]) -> list[dict]:
    """Convert records to their JSON-serializable stored form."""
    return [record.to_storage_dict() for record in records]
