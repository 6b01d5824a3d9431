"""Shared type aliases for the dispatcher package."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

Snapshot = Optional[Mapping[str, Any]]
Event = Mapping[str, Any]
EventDict = dict[str, Any]
MessageEnvelope = dict[str, Any]
StatusFields = dict[str, Any]
DispatchResult = dict[str, Any]

SendMessageFn = Callable[[MessageEnvelope], str]
UpdateRecordFn = Callable[[str, Mapping[str, Any]], None]
BoundUpdateFn = Callable[[Mapping[str, Any]], None]
