"""Rule definitions and matching logic (core domain)."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Iterable, List, Mapping, Optional

from core.config import ChatConfig
from core.models import Message

LOGGER = logging.getLogger(__name__)

Predicate = Callable[[Message, ChatConfig], bool]


@dataclass(frozen=True)
class RuleOptions:
    """Rule behavior switches passed through to the renderer registry."""

    passthrough: bool = False
    fullscreen: bool = False
    fullwidth: bool = False


@dataclass(frozen=True)
class MatchRule:
    """A named predicate mapping a message shape to a renderer."""

    name: str
    predicate: Predicate
    renderer: Optional[str] = None
    options: RuleOptions = field(default_factory=RuleOptions)

    @property
    def identifier(self) -> str:
        """Renderer identifier used by the host registry."""

        return self.renderer or self.name


def build_plugins(plugins_config: Iterable[Mapping[str, Any]]) -> List[MatchRule]:
    """Normalize plugin definitions given as plain dicts.

    Accepts ``predicate`` or ``match`` for the callable and ``identifier``,
    ``renderer`` or ``component`` for the renderer, so host configs can keep
    their own naming.
    """

    compiled: List[MatchRule] = []
    for plugin in plugins_config:
        if not plugin.get("enabled", True):
            continue
        name = plugin.get("name")
        if not name:
            raise ValueError(f"Plugin definition is missing a name: {plugin!r}")
        predicate = plugin.get("predicate") or plugin.get("match")
        if not callable(predicate):
            raise ValueError(f"Plugin {name} needs a callable predicate")
        raw_options = plugin.get("options") or {}
        options = RuleOptions(
            passthrough=bool(raw_options.get("passthrough", False)),
            fullscreen=bool(raw_options.get("fullscreen", False)),
            fullwidth=bool(raw_options.get("fullwidth", False)),
        )
        renderer = plugin.get("identifier") or plugin.get("renderer") or plugin.get("component")
        compiled.append(
            MatchRule(
                name=name,
                predicate=predicate,
                renderer=str(renderer) if renderer else None,
                options=options,
            )
        )
    return compiled


def normalize_plugins(plugins: Iterable[Any]) -> List[MatchRule]:
    """Accept plugins as MatchRule values or plain dicts, keeping their order.

    A dict that cannot be turned into a rule is logged and skipped so the
    remaining plugins and the built-ins still match.
    """

    rules: List[MatchRule] = []
    for plugin in plugins:
        if isinstance(plugin, MatchRule):
            rules.append(plugin)
            continue
        if not isinstance(plugin, Mapping):
            LOGGER.error("Ignoring plugin of unsupported type %s", type(plugin).__name__)
            continue
        try:
            rules.extend(build_plugins([plugin]))
        except ValueError:
            LOGGER.exception("Ignoring malformed plugin %s", plugin.get("name"))
    return rules


def match_rules(message: Message, rules: Iterable[MatchRule], config: ChatConfig) -> List[MatchRule]:
    """Return the rules that apply to a message, in rule order.

    Matching logic:
    - Rules are evaluated in order; a matching rule is appended to the result.
    - Scanning stops after the first match unless that rule is passthrough.
    - A predicate that raises is logged and counts as a non-match.
    """

    matched: List[MatchRule] = []
    for rule in rules:
        try:
            hit = rule.predicate(message, config)
        except Exception:
            LOGGER.exception(
                "Rule %s failed for message %s", getattr(rule, "name", rule), message.message_id
            )
            continue
        if not hit:
            continue
        matched.append(rule)
        if not rule.options.passthrough:
            break
    return matched
