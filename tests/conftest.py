"""Pytest configuration and fixtures."""

from __future__ import annotations

import stat
import sys
from pathlib import Path

import pytest

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

# Add src to the Python path
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

FIXTURES_DIR = Path(__file__).parent / "fixtures"
FAKE_GEMINI = FIXTURES_DIR / "fake_gemini.py"

IS_WINDOWS = sys.platform == "win32"


@pytest.fixture
def project_root() -> Path:
    """Project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def fake_gemini_bin(tmp_path: Path) -> str:
    """Executable standing in for the gemini CLI.

    A shell wrapper that execs the fake script, so the pid seen by the
    invoker is the pid of the fake CLI itself.
    """
    if IS_WINDOWS:
        pytest.skip("fake gemini wrapper requires a POSIX shell")

    wrapper = tmp_path / "gemini"
    wrapper.write_text(
        "#!/bin/sh\n"
        f'exec "{sys.executable}" "{FAKE_GEMINI}" "$@"\n',
        encoding="utf-8",
    )
    wrapper.chmod(wrapper.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(wrapper)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Clear gemini-mcp environment variables and chdir to an empty directory."""
    for name in ("GEMINI_BIN", "GEMINI_MCP_CONFIG_PATH", "GEMINI_MCP_LOG_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


