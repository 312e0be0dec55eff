from __future__ import annotations

from typing import Any

from core.channels import (
    DEFAULT_PREVIEW_CHANNEL,
    PRIMARY_CHANNEL,
    SECONDARY_CHANNEL,
    dig,
    resolve_payload,
)
from core.config import ChatConfig
from core.models import Message


def _message(data: Any = None, text: str = "Test message") -> Message:
    return Message(
        trace_id="trace-1",
        source="bot",
        text=text,
        timestamp="123456",
        data={} if data is None else data,
    )


def _cognigy(**namespaces: Any) -> dict:
    return {"_cognigy": namespaces}


def test_returns_none_without_cognigy_data() -> None:
    assert resolve_payload(_message()) is None


def test_primary_channel_by_default() -> None:
    webchat = {"message": {"text": "Webchat text"}}
    payload = resolve_payload(_message(_cognigy(_webchat=webchat)))
    assert payload is not None
    assert payload.channel == PRIMARY_CHANNEL
    assert payload.content == webchat
    assert payload.text == "Webchat text"


def test_default_preview_wins_when_enabled() -> None:
    preview = {"message": {"text": "Preview text"}}
    message = _message(_cognigy(_webchat={"message": {"text": "Webchat"}}, _defaultPreview=preview))

    enabled = resolve_payload(message, ChatConfig(enable_default_preview=True))
    disabled = resolve_payload(message, ChatConfig(enable_default_preview=False))

    assert enabled is not None and enabled.channel == DEFAULT_PREVIEW_CHANNEL
    assert enabled.content == preview
    assert disabled is not None and disabled.channel == PRIMARY_CHANNEL


def test_default_preview_ignored_when_absent() -> None:
    message = _message(_cognigy(_webchat={"message": {"text": "Webchat"}}))
    payload = resolve_payload(message, ChatConfig(enable_default_preview=True))
    assert payload is not None
    assert payload.channel == PRIMARY_CHANNEL


def test_secondary_channel_requires_strict_sync_and_message_flag() -> None:
    namespaces = {
        "_webchat": {"message": {"text": "Webchat"}},
        "_facebook": {"message": {"text": "Facebook"}},
    }
    synced = _message(_cognigy(syncWebchatWithFacebook=True, **namespaces))
    unsynced = _message(_cognigy(**namespaces))
    strict = ChatConfig(strict_channel_sync=True)

    assert resolve_payload(synced, strict).channel == SECONDARY_CHANNEL
    assert resolve_payload(unsynced, strict).channel == PRIMARY_CHANNEL
    assert resolve_payload(synced, ChatConfig()).channel == PRIMARY_CHANNEL


def test_default_preview_outranks_strict_sync() -> None:
    message = _message(
        _cognigy(
            syncWebchatWithFacebook=True,
            _defaultPreview={"message": {"text": "Preview"}},
            _facebook={"message": {"text": "Facebook"}},
        )
    )
    config = ChatConfig(enable_default_preview=True, strict_channel_sync=True)
    assert resolve_payload(message, config).channel == DEFAULT_PREVIEW_CHANNEL


def test_secondary_channel_is_last_resort_fallback() -> None:
    facebook = {"message": {"text": "Facebook text"}}
    payload = resolve_payload(_message(_cognigy(_facebook=facebook)))
    assert payload is not None
    assert payload.channel == SECONDARY_CHANNEL
    assert payload.content == facebook


def test_malformed_data_never_raises() -> None:
    assert resolve_payload(_message(data="not a mapping")) is None
    assert resolve_payload(_message(data={"_cognigy": ["bad"]})) is None
    assert resolve_payload(_message(data={"_cognigy": {"_webchat": "bad"}})) is None
    assert resolve_payload(_message(data={"_cognigy": {"_webchat": None}})) is None


def test_payload_accessors() -> None:
    message = _message(
        _cognigy(
            _webchat={
                "message": {
                    "text": "Pick one",
                    "quick_replies": [{"content_type": "text", "title": "A", "payload": "a"}],
                    "attachment": {"type": "template", "payload": {"template_type": "button"}},
                }
            }
        )
    )
    payload = resolve_payload(message)
    assert payload.has_quick_replies
    assert payload.has_attachment
    assert payload.attachment_type == "template"
    assert payload.template_type == "button"
    assert not payload.is_adaptive_card


def test_empty_quick_replies_are_not_quick_replies() -> None:
    payload = resolve_payload(_message(_cognigy(_webchat={"message": {"quick_replies": []}})))
    assert not payload.has_quick_replies
    assert not payload.has_attachment
    assert payload.attachment_type is None


def test_dig_stops_at_non_mappings() -> None:
    data = {"a": {"b": [1, 2]}}
    assert dig(data, "a", "b") == [1, 2]
    assert dig(data, "a", "b", "c") is None
    assert dig(None, "a") is None
