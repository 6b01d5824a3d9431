"""Application layer: the notification dispatch use-case."""

from .dispatch import RecordUpdateError, dispatch_notification

__all__ = [
    "RecordUpdateError",
    "dispatch_notification",
]
