"""GEMINI.md project context tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from gemini_mcp.utils.prompt_injection import (
    MAX_CONFIG_SIZE,
    inject_project_context,
    read_gemini_config,
    read_gemini_config_from_path,
)


class TestReadGeminiConfig:
    """Reading GEMINI.md."""

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path: Path):
        assert await read_gemini_config_from_path(tmp_path / "GEMINI.md") is None

    @pytest.mark.asyncio
    async def test_content_returned_untrimmed(self, tmp_path: Path):
        path = tmp_path / "GEMINI.md"
        path.write_text("\n# Rules\nBe brief.\n", encoding="utf-8")
        assert await read_gemini_config_from_path(path) == "\n# Rules\nBe brief.\n"

    @pytest.mark.asyncio
    async def test_blank_file_ignored(self, tmp_path: Path):
        path = tmp_path / "GEMINI.md"
        path.write_text("  \n\t\n", encoding="utf-8")
        assert await read_gemini_config_from_path(path) is None

    @pytest.mark.asyncio
    async def test_too_large_ignored(self, tmp_path: Path):
        path = tmp_path / "GEMINI.md"
        path.write_text("a" * (MAX_CONFIG_SIZE + 1), encoding="utf-8")
        assert await read_gemini_config_from_path(path) is None

    @pytest.mark.asyncio
    async def test_exact_limit_accepted(self, tmp_path: Path):
        path = tmp_path / "GEMINI.md"
        path.write_text("a" * MAX_CONFIG_SIZE, encoding="utf-8")
        assert await read_gemini_config_from_path(path) == "a" * MAX_CONFIG_SIZE

    @pytest.mark.asyncio
    async def test_reads_from_cwd(self, clean_env: Path):
        (clean_env / "GEMINI.md").write_text("context", encoding="utf-8")
        assert await read_gemini_config() == "context"


class TestInjectProjectContext:
    """Prompt augmentation."""

    def test_without_context(self):
        assert inject_project_context("hi", None) == "hi"

    def test_with_context(self):
        assert inject_project_context("hi", "# Rules") == "# Rules\n\nhi"
