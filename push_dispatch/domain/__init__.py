"""Domain layer: message envelope and delivery outcome rules."""

from .envelope import DEFAULT_TOPIC, build_message_envelope, has_payload
from .outcome import (
    SERVER_TIMESTAMP,
    STATUS_FAILED,
    STATUS_SENT,
    error_message,
    failed_status_fields,
    resolve_server_timestamp,
    sent_status_fields,
)

__all__ = [
    "DEFAULT_TOPIC",
    "SERVER_TIMESTAMP",
    "STATUS_FAILED",
    "STATUS_SENT",
    "build_message_envelope",
    "error_message",
    "failed_status_fields",
    "has_payload",
    "resolve_server_timestamp",
    "sent_status_fields",
]
