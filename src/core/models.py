"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any socket-specific message types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

SOURCE_BOT = "bot"
SOURCE_USER = "user"
SOURCE_AGENT = "agent"
SOURCE_ENGAGEMENT = "engagement"

MessageText = Union[str, Sequence[str], None]


@dataclass(frozen=True)
class Message:
    """A single chat message as received from the backend.

    ``collated_from`` is only set on entries produced by the collator and holds
    the original messages in arrival order.
    """

    trace_id: Optional[str]
    source: str
    text: MessageText
    timestamp: Optional[str]
    data: Mapping[str, Any] = field(default_factory=dict)
    id: Optional[str] = None
    collated_from: Optional[Tuple["Message", ...]] = None

    @property
    def message_id(self) -> str:
        """Stable identifier, falling back to the timestamp."""

        if self.id:
            return self.id
        if self.trace_id:
            return self.trace_id
        return f"message-{self.timestamp}"

    @property
    def is_collated(self) -> bool:
        return bool(self.collated_from)


# Collated entries are plain messages with ``collated_from`` populated.
CollatedMessage = Message


def flatten_text(text: MessageText) -> str:
    """Return message text as one string; streamed chunks are concatenated."""

    if text is None:
        return ""
    if isinstance(text, str):
        return text
    if not is_text_sequence(text):
        return ""
    return "".join(chunk for chunk in text if isinstance(chunk, str))


def is_text_sequence(text: object) -> bool:
    """True for streamed text: any sequence of chunks other than a plain string."""

    return isinstance(text, Sequence) and not isinstance(text, (str, bytes))


def has_text(text: MessageText) -> bool:
    if isinstance(text, str):
        return text != ""
    if is_text_sequence(text):
        return len(text) > 0
    return False
