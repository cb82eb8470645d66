"""Config module tests.

Environment variable parsing, config file loading and timeout clamping.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from unittest import mock

import pytest

from gemini_mcp.config import (
    DEFAULT_TIMEOUT_SECS,
    MAX_TIMEOUT_SECS,
    Config,
    load_config,
    reload_config,
    resolve_config_path,
    resolve_timeout,
)


def write_config(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestResolveTimeout:
    """Timeout clamping."""

    @pytest.mark.parametrize("value,expected", [
        (None, DEFAULT_TIMEOUT_SECS),
        (0, DEFAULT_TIMEOUT_SECS),
        (-5, DEFAULT_TIMEOUT_SECS),
        (0.5, 0.5),
        (120, 120.0),
        (3600, MAX_TIMEOUT_SECS),
        (3601, MAX_TIMEOUT_SECS),
        (1e9, MAX_TIMEOUT_SECS),
    ])
    def test_clamping(self, value, expected):
        assert resolve_timeout(value) == expected


class TestConfigPath:
    """Config file discovery."""

    def test_default_is_cwd(self, clean_env: Path):
        assert resolve_config_path() == clean_env / "gemini-mcp.config.json"

    def test_env_override(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        target = tmp_path / "elsewhere.json"
        monkeypatch.setenv("GEMINI_MCP_CONFIG_PATH", str(target))
        assert resolve_config_path() == target

    def test_blank_env_ignored(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("GEMINI_MCP_CONFIG_PATH", "   ")
        assert resolve_config_path() == clean_env / "gemini-mcp.config.json"


class TestLoadConfig:
    """load_config()."""

    def test_defaults_without_file(self, clean_env: Path):
        config = load_config()
        assert config.gemini_bin == "gemini"
        assert config.additional_args == ()
        assert config.timeout_secs == DEFAULT_TIMEOUT_SECS
        assert config.log_debug is False
        assert config.log_file is None

    def test_file_in_cwd(self, clean_env: Path):
        write_config(
            clean_env / "gemini-mcp.config.json",
            {"additional_args": ["--yolo", "  ", " --debug "], "timeout_secs": 900},
        )
        config = load_config()
        assert config.additional_args == ("--yolo", "--debug")
        assert config.timeout_secs == 900.0

    def test_file_from_env(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        path = write_config(tmp_path / "custom.json", {"timeout_secs": 7200})
        monkeypatch.setenv("GEMINI_MCP_CONFIG_PATH", str(path))
        config = load_config()
        assert config.timeout_secs == MAX_TIMEOUT_SECS
        assert config.config_path == path

    def test_unknown_keys_ignored(self, clean_env: Path):
        write_config(clean_env / "gemini-mcp.config.json", {"theme": "dark", "timeout_secs": 30})
        assert load_config().timeout_secs == 30.0

    def test_non_positive_timeout_uses_default(self, clean_env: Path):
        write_config(clean_env / "gemini-mcp.config.json", {"timeout_secs": 0})
        assert load_config().timeout_secs == DEFAULT_TIMEOUT_SECS

    @pytest.mark.parametrize("content", [
        "{not json",
        '{"additional_args": "--yolo"}',
        "[]",
    ])
    def test_malformed_file_falls_back(self, clean_env: Path, caplog: pytest.LogCaptureFixture, content: str):
        (clean_env / "gemini-mcp.config.json").write_text(content, encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="gemini_mcp.config"):
            config = load_config()
        assert config.additional_args == ()
        assert config.timeout_secs == DEFAULT_TIMEOUT_SECS
        assert "Failed to parse config" in caplog.text

    @pytest.mark.parametrize("timeout", ["soon", "900", True, [1]])
    def test_non_numeric_timeout_keeps_args(self, clean_env: Path, timeout):
        write_config(
            clean_env / "gemini-mcp.config.json",
            {"additional_args": ["--yolo"], "timeout_secs": timeout},
        )
        config = load_config()
        assert config.timeout_secs == DEFAULT_TIMEOUT_SECS
        assert config.additional_args == ("--yolo",)

    def test_gemini_bin_env(self, clean_env: Path):
        with mock.patch.dict(os.environ, {"GEMINI_BIN": "/usr/local/bin/gemini"}):
            assert load_config().gemini_bin == "/usr/local/bin/gemini"


class TestDebugMode:
    """GEMINI_MCP_LOG_DEBUG."""

    @pytest.mark.parametrize("value", ["true", "True", "1", "yes", "on"])
    def test_truthy_values(self, clean_env: Path, value: str):
        with mock.patch.dict(os.environ, {"GEMINI_MCP_LOG_DEBUG": value}):
            config = load_config()
        assert config.log_debug is True
        assert config.log_file is not None
        assert Path(config.log_file).name.startswith("gemini_mcp_debug_")

    @pytest.mark.parametrize("value", ["false", "0", "no", ""])
    def test_falsy_values(self, clean_env: Path, value: str):
        with mock.patch.dict(os.environ, {"GEMINI_MCP_LOG_DEBUG": value}):
            config = load_config()
        assert config.log_debug is False
        assert config.log_file is None


class TestReload:
    """Process-wide config cache."""

    def test_reload_picks_up_changes(self, clean_env: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("GEMINI_BIN", "first")
        assert reload_config().gemini_bin == "first"
        monkeypatch.setenv("GEMINI_BIN", "second")
        assert reload_config().gemini_bin == "second"

    def test_repr(self):
        text = repr(Config(additional_args=("--yolo",), timeout_secs=90))
        assert "additional_args=['--yolo']" in text
        assert "timeout_secs=90" in text
