# config.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field, ValidationError

from .model import Action, CommandUnit, Job, JobGraph, ProcessRunner
from .runner import run_process


DEFAULT_CONFIG_PATH = "config.yaml"


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

@dataclass
class ConfigError(Exception):
    """The configuration could not be read or does not have the expected shape."""
    path: str
    message: str
    details: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        lines = [f"{self.message}: {self.path}"]
        lines.extend(f"  {d}" for d in self.details)
        return "\n".join(lines)


# ----------------------------------------------------------------------
# Schema
# ----------------------------------------------------------------------

class CommandSpec(BaseModel):
    name: str = ""
    cmd: str = Field(min_length=1)
    args: List[str] = Field(default_factory=list)


class GroupSpec(BaseModel):
    execdata: List[CommandSpec]


class PipelineConfig(BaseModel):
    functions: List[GroupSpec]


# ----------------------------------------------------------------------
# Loading
# ----------------------------------------------------------------------

def _format_validation_error(e: ValidationError) -> List[str]:
    lines = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        lines.append(f"{loc}: {err['msg']}")
    return lines


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> PipelineConfig:
    p = Path(path).expanduser()

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(str(p), "Could not read config", [e.strerror or str(e)]) from e

    try:
        # BaseLoader keeps every scalar as its literal text: args: [5, on] -> ["5", "on"]
        raw = yaml.load(text, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise ConfigError(str(p), "Error decoding yaml file", [str(e)]) from e

    if raw is None:
        raise ConfigError(str(p), "Config is empty")

    try:
        return PipelineConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(str(p), "Invalid config", _format_validation_error(e)) from e


def build_graph(config: PipelineConfig, runner: ProcessRunner = run_process) -> JobGraph:
    """One Job per `functions` entry, one Action per command in declared order."""
    graph: JobGraph = []
    for i, group in enumerate(config.functions):
        actions = tuple(
            Action(unit=CommandUnit(c.cmd, tuple(c.args)), name=c.name, runner=runner)
            for c in group.execdata
        )
        graph.append(Job(name=f"group-{i}", actions=actions))
    return graph


def load_graph(path: str | Path = DEFAULT_CONFIG_PATH, runner: ProcessRunner = run_process) -> JobGraph:
    return build_graph(load_config(path), runner=runner)
