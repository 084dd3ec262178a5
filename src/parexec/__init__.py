from .dsl import command, job, graph
from .runner import run_job, run_process
from .pool import Coordinator, Worker
from .model import Action, CommandUnit, Job, JobResult

__all__ = [
    "command", "job", "graph", "run_job", "run_process",
    "Coordinator", "Worker", "Action", "CommandUnit", "Job", "JobResult",
]
