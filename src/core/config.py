"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class SanitizationConfig:
    """HTML sanitization settings for text renderers.

    ``allowed_tags`` replaces the default allow-list when present.
    """

    enabled: bool = True
    allowed_tags: Optional[FrozenSet[str]] = None


@dataclass(frozen=True)
class ChatConfig:
    """Snapshot of the host widget flags consumed by the core."""

    enable_default_preview: bool = False
    strict_channel_sync: bool = False
    collate_streamed_outputs: bool = False
    show_engagement_in_chat: bool = False
    sanitization: SanitizationConfig = field(default_factory=SanitizationConfig)


DEFAULT_CONFIG = ChatConfig()
