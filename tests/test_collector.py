"""OutputCollector tests.

Test coverage:
- JSON / non-JSON line routing
- non-JSON line cap
- stderr byte cap and truncation marker
"""

from __future__ import annotations

from gemini_mcp.shared.invokers import OutputCollector
from gemini_mcp.shared.invokers.collector import (
    MAX_NON_JSON_LINES,
    MAX_STDERR_BYTES,
    STDERR_TRUNCATED_MARKER,
)


class TestStdoutLines:
    """stdout routing."""

    def test_json_line_classified(self):
        collector = OutputCollector()
        collector.feed_stdout_line('  {"type": "init", "session_id": "abc"}  ')
        assert collector.valid_json_seen is True
        assert collector.result.session_id == "abc"
        assert collector.non_json_lines == []

    def test_blank_lines_skipped(self):
        collector = OutputCollector()
        collector.feed_stdout_line("")
        collector.feed_stdout_line("   \t")
        assert collector.valid_json_seen is False
        assert collector.non_json_lines == []
        assert collector.result.all_messages == []

    def test_non_json_kept_trimmed(self):
        collector = OutputCollector()
        collector.feed_stdout_line("  Loaded cached credentials.  ")
        assert collector.non_json_lines == ["Loaded cached credentials."]
        assert collector.valid_json_seen is False

    def test_json_scalar_counts_as_valid(self):
        collector = OutputCollector()
        collector.feed_stdout_line("42")
        assert collector.valid_json_seen is True
        assert collector.result.all_messages == [42]

    def test_non_json_cap(self):
        collector = OutputCollector()
        for i in range(MAX_NON_JSON_LINES + 10):
            collector.feed_stdout_line(f"noise {i}")
        assert len(collector.non_json_lines) == MAX_NON_JSON_LINES
        assert collector.non_json_lines[0] == "noise 0"


class TestStderr:
    """stderr capture."""

    def test_lines_joined_with_newline(self):
        collector = OutputCollector()
        collector.feed_stderr_line("first")
        collector.feed_stderr_line("second")
        assert collector.stderr == "first\nsecond"
        assert collector.stderr_size == len("first\nsecond")
        assert collector.stderr_truncated is False

    def test_truncated_once_within_cap(self):
        collector = OutputCollector()
        line = "x" * 999
        for _ in range(300):
            collector.feed_stderr_line(line)

        stderr = collector.stderr
        assert collector.stderr_truncated is True
        assert stderr.endswith(STDERR_TRUNCATED_MARKER)
        assert stderr.count(STDERR_TRUNCATED_MARKER) == 1
        assert len(stderr.encode("utf-8")) <= MAX_STDERR_BYTES
        assert collector.stderr_size == len(stderr.encode("utf-8"))

    def test_multibyte_not_split(self):
        collector = OutputCollector(max_stderr_bytes=len(STDERR_TRUNCATED_MARKER) + 5)
        collector.feed_stderr_line("é" * 10)

        stderr = collector.stderr
        assert stderr == "éé" + STDERR_TRUNCATED_MARKER
        assert len(stderr.encode("utf-8")) <= collector.max_stderr_bytes

    def test_lines_after_truncation_dropped(self):
        collector = OutputCollector(max_stderr_bytes=len(STDERR_TRUNCATED_MARKER) + 4)
        collector.feed_stderr_line("abcdefgh")
        collector.feed_stderr_line("more")
        assert collector.stderr == "abcd" + STDERR_TRUNCATED_MARKER
