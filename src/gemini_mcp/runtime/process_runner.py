"""Process runner with subprocess isolation and reliable termination.

This module provides:
- Cross-platform subprocess isolation (new session/process group)
- Forced kill of the whole process group (deadline expiry)
- Graceful termination (SIGTERM -> timeout -> SIGKILL) that survives cancellation
- Concurrent line pumping of stdout and stderr in a single task

Key design points:
- POSIX: start_new_session=True to create new process group
- Windows: CREATE_NEW_PROCESS_GROUP for signal isolation
- stdin is always DEVNULL so the child cannot read the MCP JSON-RPC channel
- Termination targets the process group, not just the main process
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import subprocess
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

__all__ = [
    "ProcessRunner",
    "ProcessSpec",
    "pump_streams",
    "OVERLONG_LINE_PLACEHOLDER",
]

logger = logging.getLogger(__name__)

# Platform detection
IS_WINDOWS = sys.platform == "win32"

# Default timeouts
DEFAULT_TERM_TIMEOUT = 2.0  # seconds to wait after SIGTERM
DEFAULT_KILL_TIMEOUT = 1.0  # seconds to wait after SIGKILL

# StreamReader line limit; stream-json lines can carry whole file contents
DEFAULT_LINE_LIMIT = 16 * 1024 * 1024

# Handed to the line handler in place of a line over the limit
OVERLONG_LINE_PLACEHOLDER = "[over-long line skipped]"

LineHandler = Callable[[str], None]


@dataclass(frozen=True)
class ProcessSpec:
    """Specification for a subprocess to run.

    Attributes:
        argv: Command line arguments (first element is the executable)
        cwd: Working directory for the process (None = inherit)
        env: Environment variables (None = inherit parent)
    """

    argv: list[str]
    cwd: Path | None = None
    env: Mapping[str, str] | None = None


@dataclass
class ProcessRunner:
    """Cross-platform process starter and terminator.

    Example:
        runner = ProcessRunner()
        process = await runner.start(ProcessSpec(argv=["gemini", "-o", "stream-json", "hi"]))
        try:
            await pump_streams(process, on_stdout, on_stderr)
            await process.wait()
        finally:
            if process.returncode is None:
                await runner.terminate(process)
    """

    term_timeout: float = DEFAULT_TERM_TIMEOUT
    kill_timeout: float = DEFAULT_KILL_TIMEOUT
    line_limit: int = DEFAULT_LINE_LIMIT

    async def start(self, spec: ProcessSpec) -> asyncio.subprocess.Process:
        """Start the subprocess in its own process group.

        Raises:
            OSError: If the executable cannot be started
        """
        kwargs = self._build_subprocess_kwargs(spec)

        process = await asyncio.create_subprocess_exec(
            *spec.argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            limit=self.line_limit,
            **kwargs,
        )

        logger.debug(
            f"Started subprocess pid={process.pid} "
            f"argv={spec.argv[0]} cwd={spec.cwd or os.getcwd()}"
        )
        return process

    def _build_subprocess_kwargs(self, spec: ProcessSpec) -> dict[str, Any]:
        """Build platform-specific subprocess kwargs."""
        kwargs: dict[str, Any] = {}

        if spec.cwd is not None:
            kwargs["cwd"] = spec.cwd
        if spec.env is not None:
            kwargs["env"] = dict(spec.env)

        if IS_WINDOWS:
            kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP
        else:
            # POSIX: start_new_session (equivalent to setsid)
            kwargs["start_new_session"] = True

        return kwargs

    async def kill(self, process: asyncio.subprocess.Process) -> None:
        """Force kill the process group and reap the child.

        Used when the deadline expires: no grace period. Shielded so that
        a cancelled caller still leaves no zombie behind.
        """
        await self._shielded(process, self._do_kill(process))

    async def terminate(self, process: asyncio.subprocess.Process) -> None:
        """Terminate gracefully, then forcefully if needed.

        Used when the caller abandons a running invocation.
        """
        await self._shielded(process, self._do_terminate(process))

    async def _shielded(self, process: asyncio.subprocess.Process, coro: Any) -> None:
        task = asyncio.ensure_future(coro)
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            # Let the cleanup finish before propagating the cancellation
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                logger.debug(f"Double cancel during subprocess cleanup pid={process.pid}")
            raise

    async def _do_kill(self, process: asyncio.subprocess.Process) -> None:
        pid = process.pid
        if process.returncode is None:
            logger.debug(f"Force killing subprocess pid={pid}")
            try:
                if IS_WINDOWS:
                    process.kill()
                else:
                    self._posix_signal(process, signal.SIGKILL)
            except ProcessLookupError:
                pass
        await self._reap(process)

    async def _do_terminate(self, process: asyncio.subprocess.Process) -> None:
        """Termination strategy.

        1. Send SIGTERM (or CTRL_BREAK_EVENT on Windows)
        2. Wait up to term_timeout for graceful exit
        3. If still running, send SIGKILL (or kill() on Windows)
        4. Reap the child
        """
        pid = process.pid
        logger.debug(f"Terminating subprocess pid={pid}")

        try:
            if IS_WINDOWS:
                try:
                    os.kill(pid, signal.CTRL_BREAK_EVENT)
                except OSError as e:
                    logger.debug(f"CTRL_BREAK_EVENT failed, falling back: {e}")
                    process.terminate()
            else:
                self._posix_signal(process, signal.SIGTERM)

            try:
                await asyncio.wait_for(process.wait(), timeout=self.term_timeout)
                logger.debug(
                    f"Subprocess terminated gracefully pid={pid} "
                    f"returncode={process.returncode}"
                )
                return
            except asyncio.TimeoutError:
                pass
        except ProcessLookupError:
            logger.debug(f"Subprocess already exited pid={pid}")

        await self._do_kill(process)

    async def _reap(self, process: asyncio.subprocess.Process) -> None:
        try:
            await asyncio.wait_for(process.wait(), timeout=self.kill_timeout)
            logger.debug(
                f"Subprocess reaped pid={process.pid} "
                f"returncode={process.returncode}"
            )
        except asyncio.TimeoutError:
            logger.warning(f"Subprocess did not exit after kill pid={process.pid}")
            # A killed process always exits eventually; wait without limit
            await process.wait()

    def _posix_signal(self, process: asyncio.subprocess.Process, sig: int) -> None:
        """Send a signal to the process group, falling back to the process."""
        try:
            # Process group id equals pid due to start_new_session
            pgid = os.getpgid(process.pid)
            os.killpg(pgid, sig)
            logger.debug(f"Sent {signal.Signals(sig).name} to process group pgid={pgid}")
        except ProcessLookupError:
            raise
        except OSError as e:
            logger.debug(f"killpg failed, falling back to direct signal: {e}")
            process.send_signal(sig)


async def _read_lines(
    stream: asyncio.StreamReader | None,
    handler: LineHandler,
    name: str,
) -> None:
    """Feed every line of one stream to its handler until EOF."""
    if stream is None:
        return

    while True:
        try:
            line = await stream.readline()
        except ValueError as e:
            # Line exceeded the StreamReader limit; the reader skips past it
            logger.warning(f"Skipping over-long {name} line: {e}")
            handler(OVERLONG_LINE_PLACEHOLDER)
            continue
        except OSError as e:
            logger.warning(f"Failed to read from {name}: {e}")
            return

        if not line:
            return

        handler(line.decode("utf-8", errors="replace").rstrip("\r\n"))


async def pump_streams(
    process: asyncio.subprocess.Process,
    on_stdout: LineHandler,
    on_stderr: LineHandler,
) -> None:
    """Read stdout and stderr concurrently until both are exhausted.

    Both read loops are interleaved on the event loop (no thread per
    stream), so a child that writes to both pipes never deadlocks. Line order is kept
    within each stream; there is no ordering between the two streams.
    A read error ends only the stream it happened on. A line longer than
    the reader limit reaches the handler as OVERLONG_LINE_PLACEHOLDER.

    Args:
        process: running subprocess with piped stdout/stderr
        on_stdout: called with each stdout line (newline removed)
        on_stderr: called with each stderr line (newline removed)
    """
    await asyncio.gather(
        _read_lines(process.stdout, on_stdout, "stdout"),
        _read_lines(process.stderr, on_stderr, "stderr"),
    )
