"""Delivery outcome fields written back onto a notification record."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Mapping

from ..types import StatusFields

STATUS_SENT = "sent"
STATUS_FAILED = "failed"


class _ServerTimestamp:
    """Placeholder for a timestamp the record store assigns at write time."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


def sent_status_fields() -> StatusFields:
    return {"status": STATUS_SENT, "sentAt": SERVER_TIMESTAMP}


def failed_status_fields(error: str) -> StatusFields:
    return {"status": STATUS_FAILED, "error": error}


def error_message(exc: BaseException) -> str:
    """Return the human-readable message of a delivery failure."""
    text = str(exc)
    return text if text.strip() else exc.__class__.__name__


def resolve_server_timestamp(fields: Mapping[str, Any], value: Any = None) -> dict[str, Any]:
    """Swap `SERVER_TIMESTAMP` for a store-specific value.

    With no `value`, the current UTC time is used.
    """
    replacement = value if value is not None else datetime.now(tz=UTC)
    return {
        key: (replacement if item is SERVER_TIMESTAMP else item)
        for key, item in fields.items()
    }
