"""Core message processing pipeline.

This module is renderer-agnostic. It runs a transcript through the core in a
fixed order and returns plain data for the host renderer registry:
1) Collate consecutive streamed bot outputs
2) Resolve the active channel payload of each entry
3) Match renderers (plugins first, then built-ins)
4) Sanitize the display text
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from core.channels import ChannelPayload, resolve_payload
from core.collation import collate
from core.config import ChatConfig
from core.matcher import match
from core.models import Message
from core.rules_engine import MatchRule, normalize_plugins
from core.sanitizer import sanitize_content

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderEntry:
    """Everything a host needs to render one (possibly collated) message."""

    message: Message
    rules: Tuple[MatchRule, ...]
    payload: Optional[ChannelPayload]
    display_text: str

    @property
    def renderers(self) -> List[str]:
        return [rule.identifier for rule in self.rules]

    @property
    def is_renderable(self) -> bool:
        return bool(self.rules)


class MessageProcessor:
    """Orchestrates collation, payload resolution, matching, and sanitization."""

    def __init__(self, config: Optional[ChatConfig] = None, plugins: Iterable[Any] = ()) -> None:
        self._config = config or ChatConfig()
        self._plugins: Sequence[MatchRule] = tuple(normalize_plugins(plugins))

    @property
    def config(self) -> ChatConfig:
        return self._config

    def build_entry(self, message: Message) -> RenderEntry:
        """Process one already-collated message."""

        rules = match(message, self._config, self._plugins)
        if not rules:
            LOGGER.debug("No renderer matched message %s", message.message_id)
        return RenderEntry(
            message=message,
            rules=tuple(rules),
            payload=resolve_payload(message, self._config),
            display_text=sanitize_content(message.text, self._config.sanitization),
        )

    def process(self, messages: Iterable[Message]) -> List[RenderEntry]:
        """Process a full transcript; the whole list is re-derived on each call."""

        originals = list(messages)
        collated = collate(originals, self._config)
        if len(collated) != len(originals):
            LOGGER.debug("Collated %s messages into %s entries", len(originals), len(collated))
        return [self.build_entry(message) for message in collated]
