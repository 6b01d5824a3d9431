#!/usr/bin/env python3
"""Run the Firestore notification dispatcher.

This process watches the notifications collection and sends each new record
through Firebase Cloud Messaging, writing `status` back onto the record.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

# Allow running this file directly from repository root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from push_dispatch.adapters.firebase_runtime import run_dispatcher_forever  # noqa: E402


def main() -> int:
    parse_args()
    _load_env_file(REPO_ROOT / ".env")
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    return run_dispatcher_forever()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Watch Firestore for new notification records and deliver them via FCM."
    )
    return parser.parse_args()


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
