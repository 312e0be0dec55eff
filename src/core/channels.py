"""Channel payload resolution (core domain).

A backend may ship the same logical message pre-rendered for several delivery
targets under ``data["_cognigy"]``. The resolver picks exactly one of them
based on the widget flags and the shape of the payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Tuple

from core.config import ChatConfig
from core.models import Message

COGNIGY_KEY = "_cognigy"
PRIMARY_CHANNEL = "_webchat"
DEFAULT_PREVIEW_CHANNEL = "_defaultPreview"
SECONDARY_CHANNEL = "_facebook"
SYNC_WITH_SECONDARY_KEY = "syncWebchatWithFacebook"


def dig(value: Any, *keys: str) -> Any:
    """Safely walk nested mappings, returning None on any missing level."""

    for key in keys:
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value


@dataclass(frozen=True)
class ChannelPayload:
    """The active namespace of a message payload."""

    channel: str
    content: Mapping[str, Any]

    @property
    def message(self) -> Optional[Mapping[str, Any]]:
        message = self.content.get("message")
        return message if isinstance(message, Mapping) else None

    @property
    def text(self) -> Optional[str]:
        text = dig(self.message, "text")
        return text if isinstance(text, str) else None

    @property
    def has_quick_replies(self) -> bool:
        quick_replies = dig(self.message, "quick_replies")
        return isinstance(quick_replies, (list, tuple)) and len(quick_replies) > 0

    @property
    def has_attachment(self) -> bool:
        return dig(self.message, "attachment") is not None

    @property
    def attachment_type(self) -> Optional[str]:
        return dig(self.message, "attachment", "type")

    @property
    def template_type(self) -> Optional[str]:
        return dig(self.message, "attachment", "payload", "template_type")

    @property
    def is_adaptive_card(self) -> bool:
        return is_adaptive_card_payload(self.content)


def is_adaptive_card_payload(value: Any) -> bool:
    return isinstance(value, Mapping) and "adaptiveCard" in value


def channel_namespaces(message: Message) -> Mapping[str, Any]:
    """Return ``data["_cognigy"]`` or an empty mapping when malformed."""

    namespaces = dig(message.data, COGNIGY_KEY)
    return namespaces if isinstance(namespaces, Mapping) else {}


def _namespace(namespaces: Mapping[str, Any], channel: str) -> Optional[Mapping[str, Any]]:
    value = namespaces.get(channel)
    return value if isinstance(value, Mapping) else None


# A gate returns True when its namespace may be used for this resolution.
ChannelGate = Callable[[Mapping[str, Any], ChatConfig], bool]


def _default_preview_gate(namespaces: Mapping[str, Any], config: ChatConfig) -> bool:
    return config.enable_default_preview


def _strict_sync_gate(namespaces: Mapping[str, Any], config: ChatConfig) -> bool:
    return config.strict_channel_sync and bool(namespaces.get(SYNC_WITH_SECONDARY_KEY))


def _always(namespaces: Mapping[str, Any], config: ChatConfig) -> bool:
    return True


# Highest precedence first.
CHANNEL_PRECEDENCE: Tuple[Tuple[str, ChannelGate], ...] = (
    (DEFAULT_PREVIEW_CHANNEL, _default_preview_gate),
    (SECONDARY_CHANNEL, _strict_sync_gate),
    (PRIMARY_CHANNEL, _always),
    (SECONDARY_CHANNEL, _always),
)


def resolve_payload(message: Message, config: Optional[ChatConfig] = None) -> Optional[ChannelPayload]:
    """Pick the active channel payload for a message, or None if there is none."""

    config = config or ChatConfig()
    namespaces = channel_namespaces(message)
    if not namespaces:
        return None

    for channel, gate in CHANNEL_PRECEDENCE:
        content = _namespace(namespaces, channel)
        if content is not None and gate(namespaces, config):
            return ChannelPayload(channel=channel, content=content)
    return None
