"""Message envelope rules.

Mental model refresher:
- Domain modules decide what gets sent, not how it is sent.
- A notification record becomes one envelope addressed to one topic:
  - `notification` carries the title/body pair shown to the user
  - `data` is the optional string-to-string payload
  - `topic` falls back to the shared audience when the record names none
- They do not talk to Firebase or to the record store.
"""

from __future__ import annotations

from ..types import MessageEnvelope, Snapshot

DEFAULT_TOPIC = "all_users"


def has_payload(snapshot: Snapshot) -> bool:
    """Return True when a creation snapshot carries any fields at all."""
    return bool(snapshot)


def build_message_envelope(
    snapshot: Snapshot,
    *,
    default_topic: str = DEFAULT_TOPIC,
) -> MessageEnvelope:
    """Build the gateway envelope for one notification record.

    `title` and `body` are forwarded as stored, even when missing. Provided
    `data` and `topic` values are forwarded verbatim.
    """
    if not has_payload(snapshot):
        raise ValueError("Cannot build a message envelope from an empty snapshot")

    return {
        "notification": {
            "title": snapshot.get("title"),
            "body": snapshot.get("body"),
        },
        "data": snapshot.get("data") or {},
        "topic": snapshot.get("topic") or default_topic,
    }
