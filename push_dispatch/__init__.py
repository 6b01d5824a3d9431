"""Push notification dispatcher for newly created notification records.

Module layout by abstraction layer:
- adapters: event parsing, gateways and record stores
- domain: envelope and outcome rules
- application: the dispatch use-case
"""

from .adapters import (
    InMemoryRecordStore,
    create_notification_record,
    handle_events,
    initialize_firebase_app,
    make_fcm_sender,
    make_firestore_updater,
    on_notification_created,
    parse_notification_event,
    run_dispatcher_forever,
    send_message_via_console,
)
from .application.dispatch import RecordUpdateError, dispatch_notification
from .domain.envelope import DEFAULT_TOPIC, build_message_envelope

__all__ = [
    "DEFAULT_TOPIC",
    "InMemoryRecordStore",
    "RecordUpdateError",
    "build_message_envelope",
    "create_notification_record",
    "dispatch_notification",
    "handle_events",
    "initialize_firebase_app",
    "make_fcm_sender",
    "make_firestore_updater",
    "on_notification_created",
    "parse_notification_event",
    "run_dispatcher_forever",
    "send_message_via_console",
]
