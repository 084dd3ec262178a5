# src/parexec/dsl.py
from __future__ import annotations

from typing import Optional

from .model import Action, CommandUnit, Job, JobGraph, ProcessRunner
from .runner import run_process


# ---------------------------------------------------------------------
# Action helper
# ---------------------------------------------------------------------

def command(
    program: str,
    *args: str,
    name: Optional[str] = None,
    runner: ProcessRunner = run_process,
) -> Action:
    """Create an action: command("echo", "hi there", name="echoing")."""
    if not program:
        raise ValueError("command() needs a program name")
    return Action(unit=CommandUnit(program, tuple(args)), name=name or "", runner=runner)


# ---------------------------------------------------------------------
# Job helper
# ---------------------------------------------------------------------

def job(name: str, *actions: Action) -> Job:
    if not actions:
        raise ValueError(f"job({name!r}) must have at least one action")
    return Job(name=name, actions=tuple(actions))


# ---------------------------------------------------------------------
# Graph helper
# ---------------------------------------------------------------------

def graph(*jobs: Job) -> JobGraph:
    """
    Equivalent of a config file, in code:

        graph(
            job("a", command("echo", "a")),
            job("b", command("echo", "b"), command("echo", "c")),
        )
    """
    return list(jobs)
