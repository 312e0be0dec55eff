"""Message-to-renderer matching entry point."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from core.builtin_rules import BUILTIN_RULES
from core.config import ChatConfig
from core.models import Message
from core.rules_engine import MatchRule, match_rules, normalize_plugins


def match(
    message: Message,
    config: Optional[ChatConfig] = None,
    plugins: Sequence[Any] = (),
) -> List[MatchRule]:
    """Match a message against plugins first, then the built-in rules.

    Plugins come first so hosts can override built-in rendering without
    touching the built-in list. They may be ``MatchRule`` values or plain
    dicts in the shape ``build_plugins`` accepts.
    """

    config = config or ChatConfig()
    return match_rules(message, [*normalize_plugins(plugins), *BUILTIN_RULES], config)


def match_identifiers(
    message: Message,
    config: Optional[ChatConfig] = None,
    plugins: Sequence[Any] = (),
) -> List[str]:
    """Renderer identifiers of the matching rules, as the host registry expects."""

    return [rule.identifier for rule in match(message, config, plugins)]
