"""Stream collation (core domain).

Streaming backends often emit a reply as several short bot messages. When
``collate_streamed_outputs`` is on, consecutive plain bot-text messages are
merged into one entry that keeps the originals in ``collated_from``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

from core.channels import dig, resolve_payload
from core.config import ChatConfig
from core.models import SOURCE_BOT, Message, flatten_text, has_text


@dataclass(frozen=True)
class CollationStats:
    original_count: int
    collated_count: int


def is_collation_enabled(config: Optional[ChatConfig]) -> bool:
    return bool(config and config.collate_streamed_outputs)


def _is_plain_bot_text(message: Message, config: ChatConfig) -> bool:
    if message.source != SOURCE_BOT:
        return False
    if not has_text(message.text):
        return False
    # Anything with a channel payload, attachments, or plugin data is rich content.
    if resolve_payload(message, config) is not None:
        return False
    if dig(message.data, "attachments"):
        return False
    if dig(message.data, "_plugin"):
        return False
    return True


def can_collate(current: Message, previous: Message, config: Optional[ChatConfig] = None) -> bool:
    """Return True if ``current`` may be merged into ``previous``."""

    config = config or ChatConfig()
    return _is_plain_bot_text(current, config) and _is_plain_bot_text(previous, config)


def _merge(entry: Message, current: Message) -> Message:
    originals = entry.collated_from or (entry,)
    text = f"{flatten_text(entry.text)}\n{flatten_text(current.text)}"
    return replace(entry, text=text, collated_from=(*originals, current))


def collate(messages: Iterable[Message], config: Optional[ChatConfig] = None) -> List[Message]:
    """Collate consecutive bot text messages into combined entries.

    Single left-to-right pass: a message only merges with the entry right
    before it, compared against that entry's last original message.
    """

    config = config or ChatConfig()
    if not is_collation_enabled(config):
        return list(messages)

    result: List[Message] = []
    for current in messages:
        if result:
            last_entry = result[-1]
            last_original = last_entry.collated_from[-1] if last_entry.collated_from else last_entry
            if can_collate(current, last_original, config):
                result[-1] = _merge(last_entry, current)
                continue
        result.append(current)
    return result


def collation_stats(messages: Iterable[Message], config: Optional[ChatConfig] = None) -> CollationStats:
    originals = list(messages)
    return CollationStats(
        original_count=len(originals),
        collated_count=len(collate(originals, config)),
    )
