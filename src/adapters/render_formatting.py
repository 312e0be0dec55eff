"""Terminal formatting for processed transcripts.

Keeping formatting here keeps the core free of any presentation concerns.
"""

from __future__ import annotations

from typing import Iterable

from rich.table import Table
from rich.text import Text

from core.processor import RenderEntry

SNIPPET_CHARS = 80


def _snippet(text: str, limit: int = SNIPPET_CHARS) -> str:
    single_line = " ".join(text.split())
    if len(single_line) <= limit:
        return single_line
    return single_line[: limit - 1].rstrip() + "…"


def format_renderers(entry: RenderEntry) -> Text:
    """Return the matched renderer names, dimmed when nothing matched."""

    if not entry.rules:
        return Text("(none)", style="dim")
    return Text(" + ".join(entry.renderers), style="bold")


def format_render_plan(entries: Iterable[RenderEntry], title: str = "Render plan") -> Table:
    """Build a rich Table summarizing each entry of a render plan."""

    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Message")
    table.add_column("Source")
    table.add_column("Renderers")
    table.add_column("Channel")
    table.add_column("Collated", justify="right")
    table.add_column("Text")

    for index, entry in enumerate(entries, start=1):
        message = entry.message
        collated = str(len(message.collated_from)) if message.collated_from else ""
        channel = entry.payload.channel if entry.payload else ""
        table.add_row(
            str(index),
            message.message_id,
            message.source,
            format_renderers(entry),
            channel,
            collated,
            Text(_snippet(entry.display_text)),
        )
    return table
