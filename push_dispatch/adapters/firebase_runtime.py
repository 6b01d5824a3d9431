"""Firebase adapters for delivering notifications and watching new records.

Mental model refresher:
- This module is transport glue to Firebase itself (FCM + Firestore).
- It maps Firestore document changes into the existing event-handler flow.
- Envelope and outcome rules still live in domain/application layers.
- Apps and clients are built explicitly and passed in; nothing is initialized
  at import time.
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Any, Iterable, Mapping

import firebase_admin
from firebase_admin import credentials, firestore, messaging

from ..domain.envelope import DEFAULT_TOPIC
from ..domain.outcome import resolve_server_timestamp
from ..types import DispatchResult, MessageEnvelope, SendMessageFn, UpdateRecordFn
from .event_handler import on_notification_created
from .payload import DEFAULT_COLLECTION

logger = logging.getLogger(__name__)


def initialize_firebase_app(*, name: str | None = None) -> firebase_admin.App:
    """Return the named Firebase app, initializing it from env config if needed."""
    try:
        return firebase_admin.get_app(name) if name else firebase_admin.get_app()
    except ValueError:
        pass

    options: dict[str, Any] = {}
    project_id = _optional_env("FIREBASE_PROJECT_ID")
    if project_id:
        options["projectId"] = project_id

    credential_path = _optional_env("FIREBASE_SERVICE_ACCOUNT_JSON_PATH")
    credential = credentials.Certificate(credential_path) if credential_path else None

    if name:
        app = firebase_admin.initialize_app(credential, options or None, name=name)
    else:
        app = firebase_admin.initialize_app(credential, options or None)
    logger.info(
        "Firebase app initialized name=%s project_id=%s service_account=%s",
        app.name,
        project_id,
        bool(credential_path),
    )
    return app


def make_fcm_sender(
    app: firebase_admin.App | None = None,
    *,
    dry_run: bool = False,
) -> SendMessageFn:
    """Build a gateway send function backed by Firebase Cloud Messaging."""

    def send_message_via_fcm(envelope: MessageEnvelope) -> str:
        notification = envelope.get("notification") or {}
        message = messaging.Message(
            notification=messaging.Notification(
                title=notification.get("title"),
                body=notification.get("body"),
            ),
            data=envelope.get("data"),
            topic=envelope.get("topic"),
        )
        return messaging.send(message, dry_run=dry_run, app=app)

    return send_message_via_fcm


def make_firestore_updater(client: Any) -> UpdateRecordFn:
    """Build a partial-update function bound to a Firestore client."""

    def update_record_in_firestore(record_path: str, fields: Mapping[str, Any]) -> None:
        client.document(record_path).update(
            resolve_server_timestamp(fields, firestore.SERVER_TIMESTAMP)
        )

    return update_record_in_firestore


def create_notification_record(
    payload: Mapping[str, Any],
    *,
    notification_id: str | None = None,
    client: Any = None,
) -> str:
    """Write one notification record and return its `collection/id` path."""
    if client is None:
        client = firestore.client(app=initialize_firebase_app())
    collection = client.collection(_collection_from_env())

    if notification_id:
        document = collection.document(notification_id)
        document.create(dict(payload))
    else:
        _update_time, document = collection.add(dict(payload))
    return f"{collection.id}/{document.id}"


def run_dispatcher_forever(stop: threading.Event | None = None) -> int:
    """Watch the notifications collection and dispatch every new record.

    On restart, records that already carry a `status` are skipped. A record
    whose send succeeded but whose status write failed has no `status` and is
    sent again. Setting `stop` ends the loop cleanly.
    """
    collection_name = _collection_from_env()
    default_topic = os.getenv("NOTIFICATIONS_DEFAULT_TOPIC", DEFAULT_TOPIC)
    dry_run = _env_bool("FCM_DRY_RUN", default=False)

    try:
        app = initialize_firebase_app()
        client = firestore.client(app=app)
    except Exception:
        logger.exception("Dispatcher could not start")
        return 1

    send_message = make_fcm_sender(app, dry_run=dry_run)
    update_record = make_firestore_updater(client)
    if stop is None:
        stop = threading.Event()

    def on_snapshot(_collection_snapshot: Any, changes: Iterable[Any], _read_time: Any) -> None:
        dispatch_added_documents(
            changes,
            send_message=send_message,
            update_record=update_record,
            default_topic=default_topic,
            collection=collection_name,
        )

    logger.info(
        "Dispatcher start collection=%s default_topic=%s dry_run=%s",
        collection_name,
        default_topic,
        dry_run,
    )
    watch = client.collection(collection_name).on_snapshot(on_snapshot)
    try:
        while not stop.wait(timeout=1.0):
            pass
    except KeyboardInterrupt:
        logger.info("Dispatcher stop: received keyboard interrupt")
        return 0
    finally:
        watch.unsubscribe()
    logger.info("Dispatcher stop: stop requested")
    return 0


def dispatch_added_documents(
    changes: Iterable[Any],
    *,
    send_message: SendMessageFn,
    update_record: UpdateRecordFn,
    default_topic: str = DEFAULT_TOPIC,
    collection: str = DEFAULT_COLLECTION,
) -> list[DispatchResult]:
    """Dispatch each newly added, not yet handled document in a change set."""
    results: list[DispatchResult] = []
    for change in changes:
        if change.type.name != "ADDED":
            continue

        document = change.document
        snapshot = document.to_dict()
        if snapshot and snapshot.get("status"):
            logger.debug("Skipping handled record=%s status=%s", document.reference.path, snapshot["status"])
            continue

        result = on_notification_created(
            {"path": document.reference.path, "data": snapshot},
            send_message=send_message,
            update_record=update_record,
            default_topic=default_topic,
            collection=collection,
        )
        _log_result(result)
        results.append(result)
    return results


def _log_result(result: DispatchResult) -> None:
    if result["status"] in {"sent", "skipped"}:
        logger.info(
            "Result record=%s status=%s message_id=%s",
            result["record_path"],
            result["status"],
            result["message_id"],
        )
        return
    logger.error(
        "Result record=%s status=%s should_retry=%s error=%s",
        result["record_path"],
        result["status"],
        result["should_retry"],
        result["error"],
    )


def _collection_from_env() -> str:
    return _optional_env("NOTIFICATIONS_COLLECTION") or DEFAULT_COLLECTION


def _optional_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise RuntimeError(f"Invalid boolean value for {name}: {raw!r}")
