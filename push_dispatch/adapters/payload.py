"""Creation-event payload adapter functions.

Mental model refresher:
- This is an adapter/edge module.
- It translates transport-shaped creation events into the internal event
  dictionary used by the dispatcher:
  - plain events: {"path": "notifications/{id}", "data": {...}}
  - Firestore trigger events: {"value": {"name": ..., "fields": {...}}}
- It validates shape and the record path, but it does not decide delivery
  outcomes.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..types import Event, EventDict

DEFAULT_COLLECTION = "notifications"

_DOCUMENTS_MARKER = "/documents/"


def parse_notification_event(
    event: Event,
    *,
    collection: str = DEFAULT_COLLECTION,
) -> EventDict:
    """Normalize one creation event into `record_path`, `notification_id`, `snapshot`.

    This is the first handoff from transport data to internal data.
    """
    if not isinstance(event, Mapping):
        raise ValueError("event must be a mapping")

    if "value" in event:
        document = event.get("value") or {}
        if not isinstance(document, Mapping):
            raise ValueError("event.value must be a document mapping")
        path = _as_required_str(document.get("name"), "value.name")
        fields = document.get("fields") or {}
        if not isinstance(fields, Mapping):
            raise ValueError("event.value.fields must be a mapping")
        snapshot: dict[str, Any] | None = decode_firestore_fields(fields)
    else:
        path = _as_required_str(event.get("path"), "path")
        data = event.get("data")
        if data is not None and not isinstance(data, Mapping):
            raise ValueError("event.data must be a mapping when present")
        snapshot = dict(data) if data is not None else None

    notification_id = parse_record_path(path, collection=collection)
    return {
        "record_path": f"{collection}/{notification_id}",
        "notification_id": notification_id,
        "snapshot": snapshot,
    }


def parse_record_path(path: str, *, collection: str = DEFAULT_COLLECTION) -> str:
    """Return the notification id from `{collection}/{id}` or a full document name."""
    text = path.strip().strip("/")
    if _DOCUMENTS_MARKER in f"/{text}":
        text = f"/{text}".split(_DOCUMENTS_MARKER, 1)[1]

    parts = text.split("/")
    if len(parts) != 2 or parts[0] != collection or not parts[1]:
        raise ValueError(f"Record path must look like {collection}/{{notificationId}}: {path!r}")
    return parts[1]


def decode_firestore_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Decode a Firestore typed `fields` mapping into plain Python values."""
    return {str(key): decode_firestore_value(value) for key, value in fields.items()}


def decode_firestore_value(value: Mapping[str, Any]) -> Any:
    if not isinstance(value, Mapping) or len(value) != 1:
        raise ValueError(f"Unsupported Firestore value: {value!r}")

    (kind, raw), = value.items()
    if kind in {"stringValue", "timestampValue", "referenceValue", "bytesValue"}:
        return raw
    if kind == "nullValue":
        return None
    if kind == "booleanValue":
        return bool(raw)
    if kind == "integerValue":
        return _as_number(int, raw, kind)
    if kind == "doubleValue":
        return _as_number(float, raw, kind)
    if kind == "mapValue":
        fields = _as_mapping(raw, kind).get("fields") or {}
        if not isinstance(fields, Mapping):
            raise ValueError(f"{kind}.fields must be a mapping")
        return decode_firestore_fields(fields)
    if kind == "arrayValue":
        values = _as_mapping(raw, kind).get("values") or []
        if not isinstance(values, list):
            raise ValueError(f"{kind}.values must be a list")
        return [decode_firestore_value(item) for item in values]
    if kind == "geoPointValue":
        return dict(_as_mapping(raw, kind))
    raise ValueError(f"Unsupported Firestore value type: {kind}")


def _as_mapping(raw: Any, kind: str) -> Mapping[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"{kind} must hold a mapping, got {type(raw).__name__}")
    return raw


def _as_number(convert: Any, raw: Any, kind: str) -> Any:
    if isinstance(raw, bool):
        raise ValueError(f"Invalid {kind}: {raw!r}")
    try:
        return convert(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid {kind}: {raw!r}") from exc


def _as_required_str(value: Any, field_name: str) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValueError(f"Missing required field: {field_name}")
    return text
