"""Console output formatting utilities for parexec."""

from __future__ import annotations

import sys
import threading
import traceback
from typing import Optional, TextIO

from ..model import Action, ActionResult, Job, JobGraph, JobResult


class Console:
    """
    Centralized console output formatting.

    Also acts as the run reporter: workers call action_started /
    action_finished / job_finished from their own threads, so every write
    happens under one lock and a command's output is emitted in one piece.
    """

    def __init__(
        self,
        debug: bool = False,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ):
        """
        Initialize console formatter.

        Args:
            debug: If True, show worker diagnostics and stack traces
            out: Stream for regular output (defaults to sys.stdout at write time)
            err: Stream for errors and debug lines (defaults to sys.stderr)
        """
        self.debug = debug
        self._out = out
        self._err = err
        self._lock = threading.Lock()

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err if self._err is not None else sys.stderr

    def _write(self, text: str, *, stderr: bool = False) -> None:
        stream = self.err if stderr else self.out
        if not text.endswith("\n"):
            text += "\n"
        with self._lock:
            stream.write(text)
            stream.flush()

    # ------------------------------------------------------------------
    # Reporter
    # ------------------------------------------------------------------

    def action_started(self, job: Job, action: Action) -> None:
        self._write(f"executing {action.unit.program}")

    def action_finished(self, job: Job, result: ActionResult) -> None:
        if result.ok:
            self.print_output(result.output)
        else:
            self.print_failure(
                result.action.label,
                result.error or "unknown error",
                exit_code=result.result.exit_code,
                command=str(result.action.unit),
            )

    def job_finished(self, job_result: JobResult) -> None:
        failed = len(job_result.failed)
        self.print_debug(
            f"{job_result.worker} finished {job_result.job.name} "
            f"({len(job_result.results)} action(s), {failed} failed)"
        )

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def print_run_started(self, config: str, job_count: int, workers: int) -> None:
        """Print run start information."""
        self._write(
            "\nRUN STARTED\n"
            f"Config: {config}\n"
            f"Jobs: {job_count}\n"
            f"Workers: {workers}\n"
        )

    def print_output(self, output: str) -> None:
        """Emit a command's captured stdout as a single write."""
        if output:
            self._write(output)

    def print_failure(
        self,
        name: str,
        reason: str,
        exit_code: Optional[int] = None,
        command: Optional[str] = None,
    ) -> None:
        """
        Print an action failure as one block.

        Args:
            name: Action label (display name or program)
            reason: Failure reason/error message
            exit_code: Exit code, None if the program never started
            command: Rendered command line, shown in debug mode
        """
        lines = [f"STEP FAILED: {name}"]
        if exit_code is not None:
            lines.append(f"Exit code: {exit_code}")
        lines.append(f"Error: {reason}")
        if self.debug and command:
            lines.append(f"Command: {command}")
        self._write("\n".join(lines))

    def print_plan(self, graph: JobGraph) -> None:
        """Print every job with its commands, in dispatch order."""
        lines = []
        for j in graph:
            lines.append(f"{j.name} ({len(j.actions)} action(s))")
            for a in j.actions:
                label = f"{a.name}: " if a.name else ""
                lines.append(f"  {label}{a.unit}")
        self._write("\n".join(lines) if lines else "(no jobs)")

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        lines = [f"\nERROR: {title}", message]
        if details:
            lines.extend(f"  {d}" for d in details)
        if suggestion:
            lines.append(f"\n{suggestion}")
        self._write("\n".join(lines), stderr=True)

    def print_exception(self, exc: Exception) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            self._write("".join(traceback.format_exception(exc)), stderr=True)
        else:
            self._write(f"Error: {exc}", stderr=True)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        self._write(message)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            self._write(f"[DEBUG] {message}", stderr=True)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
