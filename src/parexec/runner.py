# runner.py
from __future__ import annotations

import subprocess
from typing import List, Protocol

from .model import Action, ActionResult, CommandResult, CommandUnit, Job, JobResult


# ----------------------------------------------------------------------
# Execution primitives
# ----------------------------------------------------------------------

def run_process(unit: CommandUnit) -> CommandResult:
    """
    Run one command to completion and capture its stdout.

    stderr is inherited from the parent so it reaches the terminal directly.
    A non-zero exit or a spawn failure is returned as an error, never raised.
    """
    try:
        proc = subprocess.run(
            unit.argv,
            stdout=subprocess.PIPE,
            text=True,
            check=False,
        )
    except OSError as e:
        # not found, not executable, ...
        return CommandResult(exit_code=None, error=f"{unit.program}: {e.strerror or e}")

    if proc.returncode != 0:
        return CommandResult(
            exit_code=proc.returncode,
            output=proc.stdout or "",
            error=f"exit status {proc.returncode}",
        )

    return CommandResult(exit_code=0, output=proc.stdout or "")


# ----------------------------------------------------------------------
# Reporting
# ----------------------------------------------------------------------

class Reporter(Protocol):
    def action_started(self, job: Job, action: Action) -> None: ...

    def action_finished(self, job: Job, result: ActionResult) -> None: ...

    def job_finished(self, job_result: JobResult) -> None: ...


class NullReporter:
    """Reporter that discards everything."""

    def action_started(self, job: Job, action: Action) -> None:
        pass

    def action_finished(self, job: Job, result: ActionResult) -> None:
        pass

    def job_finished(self, job_result: JobResult) -> None:
        pass


# ----------------------------------------------------------------------
# Job execution
# ----------------------------------------------------------------------

def run_job(job: Job, reporter: Reporter, worker: str = "") -> JobResult:
    """
    Attempt every action of `job` in declared order.

    A failed action is reported and the chain moves on to the next one;
    ordering is positional only, never a success gate.
    """
    results: List[ActionResult] = []
    for action in job.actions:
        reporter.action_started(job, action)
        result = action()
        reporter.action_finished(job, result)
        results.append(result)

    return JobResult(job=job, results=tuple(results), worker=worker)
