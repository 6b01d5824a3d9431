from __future__ import annotations

import unittest
from typing import Any, Mapping

from push_dispatch.adapters.console_gateway import InMemoryRecordStore
from push_dispatch.adapters.event_handler import handle_events, on_notification_created
from push_dispatch.application.dispatch import RecordUpdateError


def make_event(data: dict[str, Any] | None, *, notification_id: str = "n-1") -> dict[str, Any]:
    return {"path": f"notifications/{notification_id}", "data": data}


class OnNotificationCreatedTests(unittest.TestCase):
    def test_sent_result_carries_gateway_id_and_record_is_updated(self) -> None:
        store = InMemoryRecordStore()
        path = store.create(
            {"title": "Aarti", "body": "Starting in 10 min", "topic": "ghat_1"},
            notification_id="n-1",
        )

        def send_message(envelope: dict[str, Any]) -> str:
            return "msg-123"

        result = on_notification_created(
            {"path": path, "data": store.get(path)},
            send_message=send_message,
            update_record=store.update,
        )

        self.assertEqual(result["status"], "sent")
        self.assertEqual(result["message_id"], "msg-123")
        self.assertEqual(result["record_path"], "notifications/n-1")
        self.assertEqual(result["notification_id"], "n-1")
        self.assertFalse(result["should_retry"])

        stored = store.get(path)
        self.assertEqual(stored["status"], "sent")
        self.assertIn("sentAt", stored)
        self.assertNotIn("error", stored)
        self.assertEqual(stored["title"], "Aarti")

    def test_failed_result_records_error_and_keeps_exception(self) -> None:
        store = InMemoryRecordStore()
        path = store.create({"title": "X", "body": "Y"}, notification_id="n-2")
        failure = RuntimeError("invalid-registration-token")

        def send_message(envelope: dict[str, Any]) -> str:
            raise failure

        result = on_notification_created(
            {"path": path, "data": store.get(path)},
            send_message=send_message,
            update_record=store.update,
        )

        self.assertEqual(result["status"], "failed")
        self.assertEqual(result["error"], "invalid-registration-token")
        self.assertIs(result["exception"], failure)
        self.assertTrue(result["should_retry"])
        self.assertIsNone(result["message_id"])

        stored = store.get(path)
        self.assertEqual(stored["status"], "failed")
        self.assertEqual(stored["error"], "invalid-registration-token")
        self.assertNotIn("sentAt", stored)

    def test_empty_snapshot_is_skipped_without_send_or_write(self) -> None:
        sent: list[dict[str, Any]] = []
        writes: list[tuple[str, dict[str, Any]]] = []

        def send_message(envelope: dict[str, Any]) -> str:
            sent.append(envelope)
            return "never"

        def update_record(path: str, fields: Mapping[str, Any]) -> None:
            writes.append((path, dict(fields)))

        for data in (None, {}):
            with self.subTest(data=data):
                result = on_notification_created(
                    make_event(data),
                    send_message=send_message,
                    update_record=update_record,
                )
                self.assertEqual(result["status"], "skipped")
                self.assertIsNone(result["error"])

        self.assertEqual(sent, [])
        self.assertEqual(writes, [])

    def test_bad_path_is_parse_failure(self) -> None:
        sent: list[dict[str, Any]] = []

        def send_message(envelope: dict[str, Any]) -> str:
            sent.append(envelope)
            return "never"

        def update_record(path: str, fields: Mapping[str, Any]) -> None:
            raise AssertionError("no write expected")

        result = on_notification_created(
            {"path": "users/u-1", "data": {"title": "X"}},
            send_message=send_message,
            update_record=update_record,
        )

        self.assertEqual(result["status"], "parse_failed")
        self.assertIn("parse_failed", result["error"] or "")
        self.assertIsInstance(result["exception"], ValueError)
        self.assertEqual(sent, [])

    def test_malformed_firestore_values_are_parse_failures(self) -> None:
        def send_message(envelope: dict[str, Any]) -> str:
            raise AssertionError("no send expected")

        def update_record(path: str, fields: Mapping[str, Any]) -> None:
            raise AssertionError("no write expected")

        for field in ({"mapValue": "oops"}, {"integerValue": None}, {"arrayValue": ["x"]}):
            with self.subTest(field=field):
                result = on_notification_created(
                    {
                        "value": {
                            "name": "projects/p/databases/(default)/documents/notifications/n-1",
                            "fields": {"title": {"stringValue": "X"}, "data": field},
                        }
                    },
                    send_message=send_message,
                    update_record=update_record,
                )

                self.assertEqual(result["status"], "parse_failed")
                self.assertIsInstance(result["exception"], ValueError)

    def test_update_bound_to_triggering_record_path(self) -> None:
        writes: list[tuple[str, dict[str, Any]]] = []

        def send_message(envelope: dict[str, Any]) -> str:
            return "msg-1"

        def update_record(path: str, fields: Mapping[str, Any]) -> None:
            writes.append((path, dict(fields)))

        on_notification_created(
            make_event({"title": "T", "body": "B"}, notification_id="abc"),
            send_message=send_message,
            update_record=update_record,
        )

        self.assertEqual(len(writes), 1)
        self.assertEqual(writes[0][0], "notifications/abc")
        self.assertEqual(set(writes[0][1]), {"status", "sentAt"})

    def test_status_write_failure_after_send_is_sent_unrecorded(self) -> None:
        def send_message(envelope: dict[str, Any]) -> str:
            return "msg-7"

        def update_record(path: str, fields: Mapping[str, Any]) -> None:
            raise ConnectionError("store offline")

        result = on_notification_created(
            make_event({"title": "T", "body": "B"}),
            send_message=send_message,
            update_record=update_record,
        )

        self.assertEqual(result["status"], "sent_unrecorded")
        self.assertEqual(result["message_id"], "msg-7")
        self.assertIsInstance(result["exception"], RecordUpdateError)
        self.assertFalse(result["should_retry"])

    def test_default_topic_override(self) -> None:
        sent: list[dict[str, Any]] = []

        def send_message(envelope: dict[str, Any]) -> str:
            sent.append(envelope)
            return "msg-1"

        on_notification_created(
            make_event({"title": "T", "body": "B"}),
            send_message=send_message,
            update_record=lambda path, fields: None,
            default_topic="broadcast",
        )

        self.assertEqual(sent[0]["topic"], "broadcast")


class HandleEventsTests(unittest.TestCase):
    def test_each_record_is_its_own_activation(self) -> None:
        store = InMemoryRecordStore()
        store.create({"title": "Aarti", "body": "Soon", "topic": "ghat_1"}, notification_id="a")
        store.create({"title": "bad", "body": "topic", "topic": "bad topic!"}, notification_id="b")
        store.create({}, notification_id="c")
        sent: list[str] = []

        def send_message(envelope: dict[str, Any]) -> str:
            sent.append(envelope["topic"])
            if " " in envelope["topic"]:
                raise ValueError("Malformed topic name")
            return f"msg-{len(sent)}"

        results = handle_events(
            list(store.events()),
            send_message=send_message,
            update_record=store.update,
        )

        self.assertEqual([item["status"] for item in results], ["sent", "failed", "skipped"])
        self.assertEqual(sent, ["ghat_1", "bad topic!"])
        self.assertEqual(store.get("notifications/a")["status"], "sent")
        self.assertEqual(store.get("notifications/b")["error"], "Malformed topic name")
        self.assertNotIn("status", store.get("notifications/c"))


if __name__ == "__main__":
    unittest.main()
