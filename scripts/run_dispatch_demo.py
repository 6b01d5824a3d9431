#!/usr/bin/env python3
"""Run the dispatcher locally without Firebase.

Records live in an in-memory store and messages are printed to the console, so
the full create -> send -> record-outcome flow can be checked offline.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

# Allow running this file directly from repository root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from push_dispatch import (  # noqa: E402
    InMemoryRecordStore,
    handle_events,
    send_message_via_console,
)


def main() -> int:
    args = parse_args()
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    store = InMemoryRecordStore()
    for record in load_records(args.records_file):
        store.create(record)

    results = handle_events(
        list(store.events()),
        send_message=send_message_via_console,
        update_record=store.update,
    )

    print("")
    print("[SUMMARY]")
    for result in results:
        stored = store.get(result["record_path"]) if result["record_path"] else {}
        print(
            f"record={result['record_path']} status={result['status']} "
            f"message_id={result['message_id']} error={result['error']} "
            f"stored_status={stored.get('status')}"
        )
    return 0 if all(item["status"] in {"sent", "skipped"} for item in results) else 1


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Dispatch sample notification records through the console gateway."
    )
    parser.add_argument(
        "--records-file",
        type=Path,
        default=None,
        help="Optional JSON file holding a list of notification records.",
    )
    return parser.parse_args()


def load_records(records_file: Path | None) -> list[dict[str, Any]]:
    if records_file is None:
        return sample_records()
    with records_file.open("r", encoding="utf-8") as file_handle:
        records = json.load(file_handle)
    if not isinstance(records, list):
        raise SystemExit("--records-file must contain a JSON list of records.")
    return records


def sample_records() -> list[dict[str, Any]]:
    return [
        {"title": "Aarti", "body": "Starting in 10 min", "topic": "ghat_1"},
        {"title": "Alert", "body": "Flood warning"},
        {},
    ]


if __name__ == "__main__":
    sys.exit(main())
