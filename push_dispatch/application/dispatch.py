"""Application orchestration for one notification record.

Mental model refresher:
- Application layer coordinates the use-case flow across domain modules.
- One activation owns exactly one record and runs strictly in order:
  1) skip records created without a payload
  2) build the envelope and send it once through the injected gateway
  3) write the outcome back onto the same record
- The gateway and the record update are injected callables; nothing here knows
  about Firebase, Firestore or any process-wide client.
"""

from __future__ import annotations

import logging

from ..domain.envelope import DEFAULT_TOPIC, build_message_envelope, has_payload
from ..domain.outcome import error_message, failed_status_fields, sent_status_fields
from ..types import BoundUpdateFn, SendMessageFn, Snapshot

logger = logging.getLogger(__name__)


class RecordUpdateError(RuntimeError):
    """The message was delivered but its status could not be recorded."""

    def __init__(self, message: str, *, message_id: str, record_path: str | None = None) -> None:
        super().__init__(message)
        self.message_id = message_id
        self.record_path = record_path


def dispatch_notification(
    snapshot: Snapshot,
    *,
    send_message: SendMessageFn,
    update_record: BoundUpdateFn,
    default_topic: str = DEFAULT_TOPIC,
    record_path: str | None = None,
) -> str | None:
    """Deliver one notification record and record the outcome on it.

    Returns the gateway message id, or None when the record had no payload.
    Delivery errors are recorded as `status=failed` and then re-raised.
    """
    if not has_payload(snapshot):
        logger.info("No data associated with the event record=%s", record_path)
        return None

    envelope = build_message_envelope(snapshot, default_topic=default_topic)
    logger.info(
        "Sending notification record=%s title=%r topic=%s",
        record_path,
        envelope["notification"]["title"],
        envelope["topic"],
    )

    try:
        message_id = send_message(envelope)
    except Exception as exc:
        error = error_message(exc)
        logger.error("Error sending notification record=%s error=%s", record_path, error)
        try:
            update_record(failed_status_fields(error))
        except Exception:
            logger.exception("Could not record delivery failure record=%s", record_path)
        raise

    logger.info("Successfully sent notification record=%s message_id=%s", record_path, message_id)

    try:
        update_record(sent_status_fields())
    except Exception as exc:
        raise RecordUpdateError(
            f"Notification sent as {message_id} but status update failed: {exc}",
            message_id=message_id,
            record_path=record_path,
        ) from exc

    return message_id
