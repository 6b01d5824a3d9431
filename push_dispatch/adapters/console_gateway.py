"""Console gateway and in-memory record store for local runs.

Mental model refresher:
- This is outbound adapter code.
- In production, FCM delivery and Firestore writes live in `firebase_runtime`.
- The dispatcher calls these through injected functions; it does not know which
  implementation is underneath.
"""

from __future__ import annotations

import uuid
from typing import Any, Iterator, Mapping

from ..domain.outcome import resolve_server_timestamp
from ..types import MessageEnvelope
from .payload import DEFAULT_COLLECTION


def send_message_via_console(envelope: MessageEnvelope) -> str:
    message_id = f"console-{uuid.uuid4().hex[:12]}"
    notification = envelope.get("notification") or {}
    print("[PUSH]")
    print(f"topic={envelope.get('topic')}")
    print(f"title={notification.get('title')}")
    print(f"body={notification.get('body')}")
    print(f"data={envelope.get('data')}")
    print(f"message_id={message_id}")
    return message_id


class InMemoryRecordStore:
    """Dict-backed stand-in for the notifications collection."""

    def __init__(self, collection: str = DEFAULT_COLLECTION) -> None:
        self.collection = collection
        self._records: dict[str, dict[str, Any]] = {}

    def create(self, data: Mapping[str, Any], notification_id: str | None = None) -> str:
        record_id = notification_id or uuid.uuid4().hex[:20]
        path = f"{self.collection}/{record_id}"
        if path in self._records:
            raise ValueError(f"Record already exists: {path}")
        self._records[path] = dict(data)
        return path

    def get(self, path: str) -> dict[str, Any]:
        return dict(self._records[path])

    def update(self, path: str, fields: Mapping[str, Any]) -> None:
        """Merge `fields` into an existing record, like a partial document update."""
        if path not in self._records:
            raise KeyError(f"No record at {path}")
        self._records[path].update(resolve_server_timestamp(fields))

    def events(self) -> Iterator[dict[str, Any]]:
        for path, data in list(self._records.items()):
            yield {"path": path, "data": dict(data)}
