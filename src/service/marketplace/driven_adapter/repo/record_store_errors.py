from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator, Optional

from src.platform.exception.exceptions import ConflictError, StoreFailureError
from src.platform.metrics.marketplace_metrics import metrics
from src.service.marketplace.app.interface.i_record_store import (
    RecordConflictError,
    RecordNotFoundError,
    RecordStoreError,
)


@contextmanager
def translate_store_errors(message: str) -> Iterator[None]:
    """
    Map store failures onto API errors.

    RecordNotFoundError is left for the caller: repos answer None/False for it.
    """
    try:
        yield
    except (RecordNotFoundError, RecordConflictError):
        raise
    except RecordStoreError as e:
        metrics.record_store_failure(operation=message)
        raise StoreFailureError(message, detail=str(e)) from e


@contextmanager
def translate_conflict(message: str) -> Iterator[None]:
    try:
        yield
    except RecordConflictError as e:
        raise ConflictError(message) from e


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Store timestamps arrive as datetimes (SQL) or ISO-8601 strings (Airtable)."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def first_link(value: Any) -> Any:
    """Airtable linked-record fields come back as a list of record ids."""
    if isinstance(value, list):
        return value[0] if value else None
    return value
