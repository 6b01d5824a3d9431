#!/usr/bin/env python3
"""Create one notification record in Firestore for local testing."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

# Allow running this file directly from repository root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from push_dispatch.adapters.firebase_runtime import create_notification_record  # noqa: E402


def main() -> int:
    _load_env_file(REPO_ROOT / ".env")
    args = parse_args()
    payload = build_payload(args)
    path = create_notification_record(payload, notification_id=args.notification_id)

    print("[CREATED]")
    print(f"path={path}")
    print(f"title={payload['title']}")
    print(f"topic={payload.get('topic', '(default)')}")
    return 0


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Write one notification record for dispatcher testing."
    )
    parser.add_argument("--title", required=True, help="Notification title.")
    parser.add_argument("--body", default="", help="Notification body text.")
    parser.add_argument(
        "--topic",
        default=None,
        help="Optional topic. Default: the dispatcher's fallback topic.",
    )
    parser.add_argument(
        "--data",
        default=None,
        help='Optional JSON object of string values, e.g. \'{"ghat":"1"}\'.',
    )
    parser.add_argument(
        "--notification-id",
        default=None,
        help="Optional record id. Default: generated by Firestore.",
    )
    return parser.parse_args()


def build_payload(args: argparse.Namespace) -> dict[str, object]:
    payload: dict[str, object] = {"title": args.title, "body": args.body}
    if args.topic:
        payload["topic"] = args.topic
    if args.data:
        data = json.loads(args.data)
        if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
            raise SystemExit("--data must be a JSON object with string values.")
        payload["data"] = data
    return payload


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return

    for line in path.read_text(encoding="utf-8").splitlines():
        text = line.strip()
        if not text or text.startswith("#") or "=" not in text:
            continue
        key, value = text.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue
        if value.startswith(("'", '"')) and value.endswith(("'", '"')) and len(value) >= 2:
            value = value[1:-1]
        os.environ.setdefault(key, value)


if __name__ == "__main__":
    sys.exit(main())
