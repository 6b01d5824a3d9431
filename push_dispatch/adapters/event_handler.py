"""Creation-event handler adapter functions.

Mental model refresher:
- This is the controller-like entrypoint for one "notification created" event.
- A store listener or a hosting runtime calls this once per new record.
- Flow:
  event -> parse adapter -> dispatch use-case -> explicit result dict
- Delivery problems come back as data (`status`, `error`, `exception`,
  `should_retry`) so the caller owns retry policy; nothing is retried here.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Sequence

from ..application.dispatch import RecordUpdateError, dispatch_notification
from ..domain.envelope import DEFAULT_TOPIC
from ..domain.outcome import error_message
from ..types import DispatchResult, Event, SendMessageFn, UpdateRecordFn
from .payload import DEFAULT_COLLECTION, parse_notification_event


def on_notification_created(
    event: Event,
    *,
    send_message: SendMessageFn,
    update_record: UpdateRecordFn,
    default_topic: str = DEFAULT_TOPIC,
    collection: str = DEFAULT_COLLECTION,
) -> DispatchResult:
    """Handle one creation event and return its delivery outcome.

    `update_record(record_path, fields)` must apply a partial update.
    """
    try:
        parsed = parse_notification_event(event, collection=collection)
    except ValueError as exc:
        return _result(
            "parse_failed",
            record_path=None,
            notification_id=None,
            error=f"parse_failed: {exc}",
            exception=exc,
        )

    record_path = parsed["record_path"]
    notification_id = parsed["notification_id"]

    try:
        message_id = dispatch_notification(
            parsed["snapshot"],
            send_message=send_message,
            update_record=partial(update_record, record_path),
            default_topic=default_topic,
            record_path=record_path,
        )
    except RecordUpdateError as exc:
        return _result(
            "sent_unrecorded",
            record_path=record_path,
            notification_id=notification_id,
            message_id=exc.message_id,
            error=str(exc),
            exception=exc,
        )
    except Exception as exc:
        return _result(
            "failed",
            record_path=record_path,
            notification_id=notification_id,
            error=error_message(exc),
            exception=exc,
            should_retry=True,
        )

    if message_id is None:
        return _result("skipped", record_path=record_path, notification_id=notification_id)

    return _result(
        "sent",
        record_path=record_path,
        notification_id=notification_id,
        message_id=message_id,
    )


def handle_events(
    events: Sequence[Event],
    *,
    send_message: SendMessageFn,
    update_record: UpdateRecordFn,
    default_topic: str = DEFAULT_TOPIC,
    collection: str = DEFAULT_COLLECTION,
) -> list[DispatchResult]:
    """Handle creation events sequentially, one activation per record."""
    results: list[DispatchResult] = []
    for event in events:
        result = on_notification_created(
            event,
            send_message=send_message,
            update_record=update_record,
            default_topic=default_topic,
            collection=collection,
        )
        results.append(result)
    return results


def _result(
    status: str,
    *,
    record_path: str | None,
    notification_id: str | None,
    message_id: str | None = None,
    error: str | None = None,
    exception: BaseException | None = None,
    should_retry: bool = False,
) -> dict[str, Any]:
    return {
        "status": status,
        "record_path": record_path,
        "notification_id": notification_id,
        "message_id": message_id,
        "error": error,
        "exception": exception,
        "should_retry": should_retry,
    }
