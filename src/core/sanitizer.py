"""HTML sanitization policy (core domain).

Parsing is delegated to ``nh3`` (bindings for the ``ammonia`` crate). This
module only owns the policy: which tags, attributes and URL schemes survive.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Iterable, Optional, Set

import nh3

from core.config import SanitizationConfig
from core.models import MessageText, flatten_text

LOGGER = logging.getLogger(__name__)

DEFAULT_ALLOWED_TAGS: FrozenSet[str] = frozenset(
    {
        # inline text
        "a", "abbr", "acronym", "b", "bdi", "bdo", "big", "br", "cite", "code",
        "data", "del", "dfn", "em", "i", "ins", "kbd", "mark", "q", "rp", "rt",
        "ruby", "s", "samp", "small", "span", "strong", "sub", "sup", "time",
        "u", "var", "wbr",
        # structure
        "address", "article", "aside", "blockquote", "center", "dd", "details",
        "div", "dl", "dt", "figcaption", "figure", "footer", "h1", "h2", "h3",
        "h4", "h5", "h6", "header", "hr", "li", "main", "nav", "ol", "p", "pre",
        "section", "summary", "ul",
        # tables
        "caption", "col", "colgroup", "table", "tbody", "td", "tfoot", "th",
        "thead", "tr",
        # media
        "area", "audio", "img", "map", "picture", "source", "track", "video",
    }
)

ALLOWED_ATTRIBUTES: FrozenSet[str] = frozenset(
    {
        "align", "alt", "autoplay", "bgcolor", "border", "cite", "class",
        "color", "cols", "colspan", "controls", "coords", "datetime", "dir",
        "download", "headers", "height", "href", "hreflang", "id", "kind",
        "label", "lang", "loop", "muted", "name", "open", "poster", "preload",
        "reversed", "rows", "rowspan", "scope", "shape", "sizes", "span", "src",
        "srclang", "srcset", "start", "tabindex", "target", "title",
        "translate", "type", "usemap", "value", "width",
    }
)

ALLOWED_URL_SCHEMES: FrozenSet[str] = frozenset({"http", "https", "mailto", "tel"})

# Removed together with their content unless explicitly allowed.
CONTENT_STRIPPED_TAGS: FrozenSet[str] = frozenset({"script", "style"})


def _attributes() -> Dict[str, Set[str]]:
    return {"*": set(ALLOWED_ATTRIBUTES)}


def _escape_markup(text: str) -> str:
    return text.replace("<", "&lt;").replace(">", "&gt;")


def sanitize(
    raw_html: Optional[str],
    allowed_tags: Optional[Iterable[str]] = None,
    enabled: bool = True,
) -> str:
    """Return ``raw_html`` with unsafe markup removed.

    ``allowed_tags`` replaces the default allow-list rather than extending it.
    On a sanitizer failure the error is logged and the original text returned.
    """

    if not raw_html:
        return ""

    if not enabled:
        return raw_html

    # Streamed LLM output can start mid-element; show it as text.
    if raw_html.startswith("</"):
        return _escape_markup(raw_html)

    tags = set(allowed_tags) if allowed_tags is not None else set(DEFAULT_ALLOWED_TAGS)
    try:
        return nh3.clean(
            raw_html,
            tags=tags,
            clean_content_tags=set(CONTENT_STRIPPED_TAGS - tags),
            attributes=_attributes(),
            generic_attribute_prefixes={"data-"},
            url_schemes=set(ALLOWED_URL_SCHEMES),
        )
    except (KeyboardInterrupt, SystemExit):
        raise
    except BaseException:
        # Rust panics surface as pyo3 PanicException, a BaseException subclass.
        LOGGER.exception("HTML sanitization failed (length=%s)", len(raw_html))
        return raw_html


def sanitize_content(content: MessageText, config: Optional[SanitizationConfig] = None) -> str:
    """Sanitize message text according to a ``SanitizationConfig``."""

    config = config or SanitizationConfig()
    return sanitize(flatten_text(content), config.allowed_tags, enabled=config.enabled)
