"""Adapter layer: event parsing, gateways and record stores."""

from .console_gateway import InMemoryRecordStore, send_message_via_console
from .event_handler import handle_events, on_notification_created
from .firebase_runtime import (
    create_notification_record,
    initialize_firebase_app,
    make_fcm_sender,
    make_firestore_updater,
    run_dispatcher_forever,
)
from .payload import parse_notification_event, parse_record_path

__all__ = [
    "InMemoryRecordStore",
    "create_notification_record",
    "handle_events",
    "initialize_firebase_app",
    "make_fcm_sender",
    "make_firestore_updater",
    "on_notification_created",
    "parse_notification_event",
    "parse_record_path",
    "run_dispatcher_forever",
    "send_message_via_console",
]
