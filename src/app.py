"""Command line entry point for inspecting transcripts with webchat-core."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from rich.console import Console

import settings
from adapters.message_mapper import messages_from_transcript
from adapters.render_formatting import format_render_plan
from core.config import ChatConfig
from core.processor import MessageProcessor
from core.sanitizer import sanitize

NAME = "WEBCHAT"
FONT = "tarty-1"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _attach(handlers: list[logging.Handler], handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    handlers.append(handler)


def _configure_logging(log_settings: settings.LoggingSettings) -> None:
    if not log_settings.enabled:
        return

    handlers: list[logging.Handler] = []
    if log_settings.console:
        _attach(handlers, logging.StreamHandler(), log_settings.level)

    if log_settings.file_path:
        directory = os.path.dirname(log_settings.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_settings.file_path,
            maxBytes=log_settings.max_bytes,
            backupCount=log_settings.backup_count,
            encoding="utf-8",
        )
        _attach(handlers, file_handler, log_settings.level)

    if not handlers:
        return

    logging.basicConfig(level=log_settings.level, handlers=handlers)


def _load_config(path: Optional[str]) -> dict:
    # An explicit --config must exist; the default location is optional.
    if path:
        return settings.load_json_config(path)
    if os.path.exists(settings.CONFIG_PATH):
        return settings.load_json_config()
    return {}


def _load_transcript(path: str) -> list:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Transcript file not found: {path}")
    with open(path, "r", encoding="utf-8") as handle:
        raw = json.load(handle)
    if isinstance(raw, dict):
        raw = raw.get("messages", [])
    if not isinstance(raw, list):
        raise ValueError("Transcript must be a list of messages or {\"messages\": [...]}")
    return raw


def _render(args: argparse.Namespace, chat_config: ChatConfig) -> None:
    logger = logging.getLogger(__name__)
    messages = messages_from_transcript(_load_transcript(args.transcript))
    logger.info("%s messages loaded from %s", len(messages), args.transcript)

    processor = MessageProcessor(config=chat_config)
    entries = processor.process(messages)

    console = Console()
    console.print(format_render_plan(entries, title=os.path.basename(args.transcript)))
    unmatched = sum(1 for entry in entries if not entry.is_renderable)
    if unmatched:
        logger.info("%s entries matched no renderer", unmatched)


def _sanitize(args: argparse.Namespace, chat_config: ChatConfig) -> None:
    raw = args.text if args.text is not None else sys.stdin.read()
    allowed_tags = chat_config.sanitization.allowed_tags
    if args.allow_tags:
        allowed_tags = frozenset(tag.strip().lower() for tag in args.allow_tags.split(",") if tag.strip())
    print(sanitize(raw, allowed_tags, enabled=chat_config.sanitization.enabled))


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="webchat-core")
    parser.add_argument("--config", help="Path to a widget config snapshot (JSON)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    render_parser = subparsers.add_parser("render", help="Show how a transcript would be rendered")
    render_parser.add_argument("transcript", help="JSON file with a list of messages")

    sanitize_parser = subparsers.add_parser("sanitize", help="Sanitize an HTML snippet")
    sanitize_parser.add_argument("text", nargs="?", help="HTML to sanitize (reads stdin when omitted)")
    sanitize_parser.add_argument("--allow-tags", help="Comma separated tags replacing the default allow-list")

    args = parser.parse_args(argv)
    raw_config = _load_config(args.config)
    _configure_logging(settings.build_logging_settings(raw_config))
    chat_config = settings.build_chat_config(raw_config)

    if args.command == "sanitize":
        _sanitize(args, chat_config)
        return
    _print_banner()
    _render(args, chat_config)


if __name__ == "__main__":
    main()
