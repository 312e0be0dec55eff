"""Configuration loading for webchat-core.

Hosts pass a configuration snapshot in the same shape the widget endpoint
serves (``settings.widgetSettings``, ``settings.behavior``,
``settings.layout``). This module turns it into the core dataclasses so the
core never parses raw dicts itself.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

from dotenv import load_dotenv

from core.config import ChatConfig, SanitizationConfig

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

load_dotenv()

# Where to find the host snapshot; WEBCHAT_CONFIG may point anywhere.
CONFIG_PATH = os.getenv("WEBCHAT_CONFIG", os.path.join(PROJECT_ROOT, "config.json"))


def load_json_config(path: Optional[str] = None) -> dict:
    """Load a JSON config snapshot from disk."""

    path = path or CONFIG_PATH
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _section(raw: dict, *keys: str) -> dict:
    value: Any = raw
    for key in keys:
        if not isinstance(value, dict):
            return {}
        value = value.get(key)
    return value if isinstance(value, dict) else {}


def _allowed_tags(widget_settings: dict) -> Optional[frozenset]:
    tags = widget_settings.get("customAllowedHtmlTags")
    if tags is None:
        return None
    if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
        raise ValueError("widgetSettings.customAllowedHtmlTags must be a list of tag names")
    return frozenset(tag.lower() for tag in tags)


def build_chat_config(raw: Optional[dict]) -> ChatConfig:
    """Build a ChatConfig from a host snapshot; missing flags use defaults."""

    raw = raw or {}
    widget_settings = _section(raw, "settings", "widgetSettings")
    behavior = _section(raw, "settings", "behavior")
    layout = _section(raw, "settings", "layout")

    # Sanitization is on unless explicitly disabled.
    sanitization = SanitizationConfig(
        enabled=not bool(layout.get("disableHtmlContentSanitization", False)),
        allowed_tags=_allowed_tags(widget_settings),
    )
    return ChatConfig(
        enable_default_preview=bool(widget_settings.get("enableDefaultPreview", False)),
        strict_channel_sync=bool(widget_settings.get("enableStrictMessengerSync", False)),
        collate_streamed_outputs=behavior.get("collateStreamedOutputs") is True,
        show_engagement_in_chat=bool(layout.get("showEngagementInChat", False)),
        sanitization=sanitization,
    )


@dataclass(frozen=True)
class LoggingSettings:
    """Resolved ``logging`` block; handlers are attached by the CLI."""

    enabled: bool
    level: int
    console: bool
    file_path: Optional[str]
    max_bytes: int
    backup_count: int


def build_logging_settings(raw: Optional[dict]) -> LoggingSettings:
    """Resolve the optional ``logging`` block; WEBCHAT_LOG_LEVEL overrides the level."""

    section = _section(raw or {}, "logging")
    level_name = str(os.getenv("WEBCHAT_LOG_LEVEL") or section.get("level", "INFO")).upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        level = logging.INFO

    file_cfg = section.get("file") if isinstance(section.get("file"), dict) else {}
    file_path = None
    if file_cfg.get("enabled", False):
        file_path = file_cfg.get("path", "logs/webchat.log")
        if not os.path.isabs(file_path):
            file_path = os.path.join(PROJECT_ROOT, file_path)

    return LoggingSettings(
        enabled=bool(section.get("enabled", False)),
        level=level,
        console=bool(section.get("console", True)),
        file_path=file_path,
        max_bytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
        backup_count=int(file_cfg.get("backup_count", 5)),
    )
