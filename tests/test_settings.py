from __future__ import annotations

import json
import logging
import os

import pytest

import settings
from core.config import ChatConfig


def test_defaults_for_empty_snapshot() -> None:
    config = settings.build_chat_config({})
    assert config == ChatConfig()
    assert config.sanitization.enabled
    assert config.sanitization.allowed_tags is None
    assert not config.collate_streamed_outputs


def test_reads_host_flags() -> None:
    config = settings.build_chat_config(
        {
            "settings": {
                "widgetSettings": {
                    "enableDefaultPreview": True,
                    "enableStrictMessengerSync": True,
                    "customAllowedHtmlTags": ["B", "i"],
                },
                "behavior": {"collateStreamedOutputs": True},
                "layout": {"disableHtmlContentSanitization": True, "showEngagementInChat": True},
            }
        }
    )
    assert config.enable_default_preview
    assert config.strict_channel_sync
    assert config.collate_streamed_outputs
    assert config.show_engagement_in_chat
    assert not config.sanitization.enabled
    assert config.sanitization.allowed_tags == frozenset({"b", "i"})


def test_ignores_malformed_sections() -> None:
    config = settings.build_chat_config({"settings": {"behavior": "yes", "layout": None}})
    assert config == ChatConfig()


def test_rejects_bad_allowed_tags() -> None:
    with pytest.raises(ValueError):
        settings.build_chat_config({"settings": {"widgetSettings": {"customAllowedHtmlTags": "b,i"}}})


def test_load_json_config(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WEBCHAT_LOG_LEVEL", raising=False)
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"logging": {"enabled": True, "level": "DEBUG"}}), encoding="utf-8")
    raw = settings.load_json_config(str(path))
    log_settings = settings.build_logging_settings(raw)
    assert log_settings.enabled
    assert log_settings.level == logging.DEBUG


def test_load_json_config_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        settings.load_json_config(str(tmp_path / "missing.json"))


def test_logging_defaults_when_block_absent(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WEBCHAT_LOG_LEVEL", raising=False)
    log_settings = settings.build_logging_settings({})
    assert not log_settings.enabled
    assert log_settings.level == logging.INFO
    assert log_settings.console
    assert log_settings.file_path is None
    assert log_settings.max_bytes == 5 * 1024 * 1024
    assert log_settings.backup_count == 5


def test_log_level_env_overrides_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEBCHAT_LOG_LEVEL", "warning")
    log_settings = settings.build_logging_settings({"logging": {"enabled": True, "level": "DEBUG"}})
    assert log_settings.level == logging.WARNING


def test_unknown_log_level_falls_back_to_info(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WEBCHAT_LOG_LEVEL", raising=False)
    assert settings.build_logging_settings({"logging": {"level": "loud"}}).level == logging.INFO
    assert settings.build_logging_settings({"logging": {"level": "getLogger"}}).level == logging.INFO


def test_relative_log_file_resolves_under_project_root() -> None:
    log_settings = settings.build_logging_settings(
        {"logging": {"enabled": True, "file": {"enabled": True, "path": "logs/app.log", "backup_count": 2}}}
    )
    assert log_settings.file_path == os.path.join(settings.PROJECT_ROOT, "logs/app.log")
    assert log_settings.backup_count == 2


def test_disabled_log_file_has_no_path() -> None:
    log_settings = settings.build_logging_settings({"logging": {"file": {"enabled": False, "path": "x.log"}}})
    assert log_settings.file_path is None
