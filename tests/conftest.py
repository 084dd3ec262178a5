"""Shared pytest fixtures and test helpers for parexec tests."""

from __future__ import annotations

import sys
import threading
import time
from pathlib import Path
from typing import Optional

import pytest
import yaml
from click.testing import CliRunner

from parexec.model import Action, ActionResult, CommandResult, CommandUnit, Job, JobResult


class FakeRunner:
    """
    Process runner stand-in: records every command instead of spawning it.

    Programs listed in `fail` exit 1. Output is the joined args plus a
    newline. Tracks how many commands are in flight at once.
    """

    def __init__(
        self,
        fail: tuple[str, ...] = (),
        delay: float = 0.0,
        barrier: Optional[threading.Barrier] = None,
    ):
        self.fail = set(fail)
        self.delay = delay
        self.barrier = barrier
        self.calls: list[CommandUnit] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def __call__(self, unit: CommandUnit) -> CommandResult:
        with self._lock:
            self.calls.append(unit)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.barrier is not None:
                self.barrier.wait()
            if self.delay:
                time.sleep(self.delay)
        finally:
            with self._lock:
                self.active -= 1

        if unit.program in self.fail:
            return CommandResult(exit_code=1, error="exit status 1")
        return CommandResult(exit_code=0, output=" ".join(unit.args) + "\n")


class RecordingReporter:
    """Collects reporter events from every worker thread."""

    def __init__(self):
        self.events: list[tuple] = []
        self.job_results: list[JobResult] = []
        self._lock = threading.Lock()

    def action_started(self, job: Job, action: Action) -> None:
        with self._lock:
            self.events.append(("start", job.name, action.unit))

    def action_finished(self, job: Job, result: ActionResult) -> None:
        with self._lock:
            self.events.append(("finish", job.name, result.action.unit, result.ok))

    def job_finished(self, job_result: JobResult) -> None:
        with self._lock:
            self.job_results.append(job_result)

    def started_for(self, job_name: str) -> list[CommandUnit]:
        return [e[2] for e in self.events if e[0] == "start" and e[1] == job_name]


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def write_config(tmp_path: Path):
    """Write a config document (dict or raw text) and return its path."""

    def _write(doc, name: str = "config.yaml") -> Path:
        path = tmp_path / name
        if isinstance(doc, str):
            path.write_text(doc, encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(doc), encoding="utf-8")
        return path

    return _write


def py_print(text: str, name: str = "") -> dict:
    """Command descriptor that prints `text` with the current interpreter."""
    return {"name": name, "cmd": sys.executable, "args": ["-c", f"print({text!r})"]}


def py_exit(code: int, name: str = "") -> dict:
    return {"name": name, "cmd": sys.executable, "args": ["-c", f"raise SystemExit({code})"]}
