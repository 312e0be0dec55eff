"""Socket-to-core message mapping adapter.

This keeps the wire format (camelCase keys, loose typing) out of the core.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

from core.models import Message, MessageText


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _coerce_text(value: Any) -> MessageText:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return tuple(chunk for chunk in value if isinstance(chunk, str))
    return str(value)


def message_from_payload(raw: Mapping[str, Any]) -> Message:
    """Build a core Message from a raw socket/JSON message dict."""

    if not isinstance(raw, Mapping):
        raise ValueError(f"Message payload must be an object, got {type(raw).__name__}")

    source = raw.get("source")
    if not isinstance(source, str) or not source:
        raise ValueError(f"Message payload has no source: {raw!r}")

    # Payload shape is left untouched; the core tolerates malformed data.
    data = raw.get("data")
    if data is None:
        data = {}

    return Message(
        trace_id=_optional_str(raw.get("traceId")),
        source=source.lower(),
        text=_coerce_text(raw.get("text")),
        timestamp=_optional_str(raw.get("timestamp")),
        data=data,
        id=_optional_str(raw.get("id")),
    )


def messages_from_transcript(raw_messages: Iterable[Mapping[str, Any]]) -> List[Message]:
    return [message_from_payload(raw) for raw in raw_messages]
