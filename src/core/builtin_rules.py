"""Built-in match rules for the internal message renderers.

Rule order is significant: the matcher stops at the first non-passthrough
match, so more specific payload shapes come before the plain text fallback.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

from core.channels import (
    DEFAULT_PREVIEW_CHANNEL,
    PRIMARY_CHANNEL,
    ChannelPayload,
    channel_namespaces,
    dig,
    is_adaptive_card_payload,
    resolve_payload,
)
from core.config import ChatConfig
from core.models import SOURCE_ENGAGEMENT, Message, is_text_sequence
from core.rules_engine import MatchRule

_ESCAPE_ONLY = re.compile(r"^[\n\t\r\v\f\s]*$")


def _plugin_type(message: Message) -> Optional[str]:
    return dig(message.data, "_plugin", "type")


def _payload(message: Message, config: ChatConfig) -> Optional[ChannelPayload]:
    return resolve_payload(message, config)


def is_only_escape_sequence(text: object) -> bool:
    """Return True for strings made only of whitespace and control escapes."""

    if not isinstance(text, str):
        return False
    return bool(_ESCAPE_ONLY.match(text.strip()))


def _is_xapp_submit(message: Message, config: ChatConfig) -> bool:
    return _plugin_type(message) == "x-app-submit"


def _is_webchat3_event(message: Message, config: ChatConfig) -> bool:
    return bool(dig(channel_namespaces(message), "_webchat3", "type"))


def _is_date_picker(message: Message, config: ChatConfig) -> bool:
    return _plugin_type(message) == "date-picker"


def _is_text_with_buttons(message: Message, config: ChatConfig) -> bool:
    payload = _payload(message, config)
    if payload is None:
        return False

    has_messenger_text = bool(payload.text)
    is_button_template = payload.template_type == "button"

    # With default preview on, plain text messages without a preview namespace
    # render through the text fallback instead.
    has_default_preview = bool(channel_namespaces(message).get(DEFAULT_PREVIEW_CHANNEL))
    if config.enable_default_preview and not has_default_preview and message.text:
        return False

    return payload.has_quick_replies or is_button_template or has_messenger_text


def _attachment_rule(kind: str):
    def predicate(message: Message, config: ChatConfig) -> bool:
        payload = _payload(message, config)
        return payload is not None and payload.attachment_type == kind

    return predicate


def _template_rule(template_type: str):
    def predicate(message: Message, config: ChatConfig) -> bool:
        payload = _payload(message, config)
        return payload is not None and payload.template_type == template_type

    return predicate


def _is_file(message: Message, config: ChatConfig) -> bool:
    return bool(dig(message.data, "attachments"))


def _is_adaptive_card(message: Message, config: ChatConfig) -> bool:
    namespaces = channel_namespaces(message)
    primary = namespaces.get(PRIMARY_CHANNEL)
    default_preview = namespaces.get(DEFAULT_PREVIEW_CHANNEL)

    if config.enable_default_preview and dig(default_preview, "message"):
        return False

    if config.enable_default_preview and is_adaptive_card_payload(default_preview):
        return True
    return is_adaptive_card_payload(primary) or _plugin_type(message) == "adaptivecards"


def _is_text(message: Message, config: ChatConfig) -> bool:
    if message.source == SOURCE_ENGAGEMENT and not config.show_engagement_in_chat:
        return False

    if dig(message.data, "attachments"):
        return False

    # Streamed outputs arrive as a sequence of chunks.
    if is_text_sequence(message.text):
        return len(message.text) > 0

    if is_only_escape_sequence(message.text) and not config.collate_streamed_outputs:
        return False

    return isinstance(message.text, str) and message.text != ""


BUILTIN_RULES: Tuple[MatchRule, ...] = (
    MatchRule(name="XAppSubmit", predicate=_is_xapp_submit),
    MatchRule(name="Webchat3Event", predicate=_is_webchat3_event),
    MatchRule(name="DatePicker", predicate=_is_date_picker),
    MatchRule(name="TextWithButtons", predicate=_is_text_with_buttons),
    MatchRule(name="Image", predicate=_attachment_rule("image")),
    MatchRule(name="Video", predicate=_attachment_rule("video")),
    MatchRule(name="Audio", predicate=_attachment_rule("audio")),
    MatchRule(name="File", predicate=_is_file),
    MatchRule(name="List", predicate=_template_rule("list")),
    MatchRule(name="Gallery", predicate=_template_rule("generic")),
    MatchRule(name="AdaptiveCard", predicate=_is_adaptive_card),
    MatchRule(name="Text", predicate=_is_text),
)

BUILTIN_RULE_NAMES = tuple(rule.name for rule in BUILTIN_RULES)
