# model.py
from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple


@dataclass(frozen=True)
class CommandUnit:
    """A program name plus its arguments. Never run through a shell."""
    program: str
    args: Tuple[str, ...] = ()

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def __str__(self) -> str:
        return shlex.join(self.argv)


@dataclass(frozen=True)
class CommandResult:
    """
    What a process runner reports back for one CommandUnit.

    exit_code is None when the program could not be spawned at all.
    output is the captured stdout (stderr is never captured).
    """
    exit_code: Optional[int]
    output: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


ProcessRunner = Callable[[CommandUnit], CommandResult]


def _default_runner(unit: CommandUnit) -> CommandResult:
    # late import: runner imports this module
    from .runner import run_process

    return run_process(unit)


@dataclass(frozen=True)
class Action:
    """
    One step of a Job: a CommandUnit bound to the runner that executes it.

    Calling the action runs the command once and returns an ActionResult.
    Calling it again simply runs the command again.
    """
    unit: CommandUnit
    name: str = ""
    runner: ProcessRunner = field(default=_default_runner, compare=False, repr=False)

    @property
    def label(self) -> str:
        return self.name or self.unit.program

    def __call__(self) -> ActionResult:
        return ActionResult(action=self, result=self.runner(self.unit))


@dataclass(frozen=True)
class ActionResult:
    action: Action
    result: CommandResult

    @property
    def ok(self) -> bool:
        return self.result.ok

    @property
    def output(self) -> str:
        return self.result.output

    @property
    def error(self) -> Optional[str]:
        return self.result.error


@dataclass(frozen=True)
class Job:
    """A sequential chain of actions. Built once, handed to exactly one worker."""
    name: str
    actions: Tuple[Action, ...]


@dataclass(frozen=True)
class JobResult:
    job: Job
    results: Tuple[ActionResult, ...]
    worker: str = ""

    @property
    def failed(self) -> Tuple[ActionResult, ...]:
        return tuple(r for r in self.results if not r.ok)

    @property
    def ok(self) -> bool:
        return not self.failed


# Independent jobs; order is kept only so dispatch is reproducible.
JobGraph = List[Job]
