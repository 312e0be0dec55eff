"""Core domain package for webchat-core.

Core contains channel resolution, rule matching, stream collation, and HTML
sanitization without any socket or UI-specific code, keeping the logic
portable across hosts.
"""

from core.channels import ChannelPayload, resolve_payload
from core.collation import can_collate, collate
from core.config import ChatConfig, SanitizationConfig
from core.matcher import match
from core.models import CollatedMessage, Message
from core.processor import MessageProcessor, RenderEntry
from core.rules_engine import MatchRule, RuleOptions, build_plugins
from core.sanitizer import sanitize, sanitize_content

__all__ = [
    "ChannelPayload",
    "ChatConfig",
    "CollatedMessage",
    "MatchRule",
    "Message",
    "MessageProcessor",
    "RenderEntry",
    "RuleOptions",
    "SanitizationConfig",
    "build_plugins",
    "can_collate",
    "collate",
    "match",
    "resolve_payload",
    "sanitize",
    "sanitize_content",
]
