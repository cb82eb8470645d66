"""CLI invoker base class.

Runs one CLI subprocess per call and turns its output into a GeminiResult:

- validates the request and prepends project context to the prompt
- starts the CLI in its own process group with stdin closed
- pumps stdout (JSON records) and stderr (diagnostics) concurrently
- races the whole run against the configured deadline
- reconciles the exit status with what was parsed
- never leaves the child running, whether it finished, timed out or the
  caller was cancelled

Per-call state lives in a fresh OutputCollector, so one invoker instance can
serve concurrent requests.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import time
from abc import ABC, abstractmethod

from ...config import Config, get_config
from ...runtime.process_runner import ProcessRunner, ProcessSpec, pump_streams
from ...utils.prompt_injection import (
    ContextProvider,
    inject_project_context,
    read_gemini_config,
)
from .collector import OutputCollector
from .errors import InvalidInputError, InvocationTimeoutError, SpawnError, StreamIOError
from .types import GeminiParams, GeminiResult

__all__ = ["CLIInvoker"]

logger = logging.getLogger(__name__)


class CLIInvoker(ABC):
    """CLI invoker base class.

    Subclasses implement:
    - cli_name: CLI name used in messages
    - build_command(): build the argv
    - finalize(): post-run checks on the result (optional)

    Example:
        invoker = GeminiInvoker(config=get_config())
        result = await invoker.run(GeminiParams(prompt="Summarize README.md"))
    """

    def __init__(
        self,
        config: Config | None = None,
        context_provider: ContextProvider | None = read_gemini_config,
        runner: ProcessRunner | None = None,
    ) -> None:
        """Initialize the invoker.

        Args:
            config: configuration (defaults to the process-wide config)
            context_provider: async source of text prepended to the prompt,
                None disables prompt augmentation
            runner: process runner (defaults to ProcessRunner())
        """
        self._config = config if config is not None else get_config()
        self._context_provider = context_provider
        self._runner = runner if runner is not None else ProcessRunner()

    @property
    def config(self) -> Config:
        return self._config

    @property
    @abstractmethod
    def cli_name(self) -> str:
        """CLI name."""
        ...

    @abstractmethod
    def build_command(self, params: GeminiParams) -> list[str]:
        """Build the CLI argv.

        Args:
            params: invocation parameters (prompt already augmented)

        Returns:
            argv list, executable first
        """
        ...

    def finalize(self, result: GeminiResult, params: GeminiParams) -> GeminiResult:
        """Post-run hook, always called after a completed run."""
        return result

    def validate_params(self, params: GeminiParams) -> None:
        """Validate the request.

        Raises:
            InvalidInputError: prompt is empty or whitespace only
        """
        if not params.prompt or not params.prompt.strip():
            raise InvalidInputError("Prompt must be a non-empty, non-whitespace string")

    async def _prepare_prompt(self, prompt: str) -> str:
        """Prepend provider text to the prompt; provider failures are ignored."""
        if self._context_provider is None:
            return prompt
        try:
            context = await self._context_provider()
        except Exception as e:
            logger.warning(f"Prompt context provider failed, continuing without it: {e}")
            return prompt
        return inject_project_context(prompt, context)

    async def run(self, params: GeminiParams) -> GeminiResult:
        """Run the CLI once and return the finalized result.

        Args:
            params: invocation parameters

        Returns:
            finalized result (success or protocol-level failure)

        Raises:
            InvalidInputError: the prompt is blank
            SpawnError: the CLI could not be started
            InvocationTimeoutError: the deadline expired (child is killed)
            StreamIOError: waiting on the child failed
        """
        self.validate_params(params)

        prompt = await self._prepare_prompt(params.prompt)
        params = dataclasses.replace(params, prompt=prompt)

        cmd = self.build_command(params)
        timeout = self._config.timeout_secs
        logger.info(f"Executing: {cmd[0]} ({len(cmd)} args, timeout={timeout:g}s)")
        logger.debug(f"[SUBPROCESS] Command: {' '.join(cmd)}")

        start_time = time.time()
        try:
            process = await self._runner.start(ProcessSpec(argv=cmd))
        except OSError as e:
            raise SpawnError(cmd[0], str(e)) from e

        collector = OutputCollector()

        try:
            try:
                await asyncio.wait_for(self._drain(process, collector), timeout=timeout)
            except asyncio.TimeoutError:
                logger.warning(
                    f"{self.cli_name} timed out after {timeout:g}s, "
                    f"killing pid={process.pid}"
                )
                await self._runner.kill(process)
                raise InvocationTimeoutError(timeout) from None

            logger.debug(
                f"[SUBPROCESS] Exit: pid={process.pid}\n"
                f"  Return code: {process.returncode}\n"
                f"  Duration: {time.time() - start_time:.3f}s\n"
                f"  Records: {len(collector.result.all_messages)}\n"
                f"  Non-JSON lines: {len(collector.non_json_lines)}\n"
                f"  Stderr size: {collector.stderr_size} bytes"
            )

            self._reconcile_exit(process.returncode, collector)
            return self.finalize(collector.result, params)

        except asyncio.CancelledError:
            logger.warning(f"{self.cli_name} execution cancelled (pid={process.pid})")
            raise

        finally:
            # Caller cancelled or something raised mid-run: no orphans
            if process.returncode is None:
                await self._runner.terminate(process)

    async def _drain(
        self,
        process: asyncio.subprocess.Process,
        collector: OutputCollector,
    ) -> None:
        """Pump both streams to EOF, then wait for the exit status."""
        await pump_streams(
            process,
            on_stdout=collector.feed_stdout_line,
            on_stderr=collector.feed_stderr_line,
        )
        try:
            await process.wait()
        except OSError as e:
            raise StreamIOError(f"Failed to wait for {self.cli_name} command: {e}") from e

    def _reconcile_exit(self, returncode: int | None, collector: OutputCollector) -> None:
        """Fold the exit status and captured diagnostics into the result."""
        result = collector.result
        result.exit_code = returncode

        if returncode != 0:
            result.mark_failed()
            if not result.error:
                result.add_error(
                    f"{self.cli_name} command failed with exit code: {returncode}"
                )
            if collector.stderr:
                result.add_error(f"Stderr: {collector.stderr}")
            # Non-JSON output helps diagnose the failure
            if collector.non_json_lines:
                result.add_error(
                    "Non-JSON output: " + "\n".join(collector.non_json_lines)
                )
            logger.warning(f"{self.cli_name} exited with code {returncode}")

        elif collector.non_json_lines and not collector.valid_json_seen:
            result.mark_failed()
            result.add_error(
                f"No valid JSON output received from {self.cli_name} CLI.\n"
                "Output: " + "\n".join(collector.non_json_lines)
            )
            logger.warning(f"{self.cli_name} produced no valid JSON output")
