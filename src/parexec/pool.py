# pool.py
from __future__ import annotations

import os
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Iterable, List, Optional

from .channel import Channel, ChannelClosed
from .model import Job, JobResult
from .runner import NullReporter, Reporter, run_job


def default_pool_size() -> int:
    """One worker per available CPU, never fewer than one."""
    return os.cpu_count() or 1


class Worker:
    """
    Pulls one job at a time off the channel and runs it to completion.

    The loop ends when the channel is closed and empty; run() returning is
    the worker's one and only "done" signal.
    """

    def __init__(self, name: str, channel: Channel, reporter: Reporter):
        self.name = name
        self.channel = channel
        self.reporter = reporter

    def run(self) -> List[JobResult]:
        done: List[JobResult] = []
        first_error: Optional[BaseException] = None
        while True:
            try:
                job: Job = self.channel.recv()
            except ChannelClosed:
                break

            try:
                job_result = run_job(job, self.reporter, worker=self.name)
                self.reporter.job_finished(job_result)
            except Exception as e:
                # keep claiming jobs so the sender is never left without a receiver
                if first_error is None:
                    first_error = e
                continue
            done.append(job_result)

        if first_error is not None:
            raise first_error
        return done


class Coordinator:
    """
    Owns the worker pool for one run.

    Lifecycle: start() -> submit_all(graph) -> shutdown() -> join().
    run(graph) does all four; using the coordinator as a context manager
    does start() on enter and shutdown() + join() on exit.
    """

    def __init__(self, workers: Optional[int] = None, reporter: Optional[Reporter] = None):
        if workers is None:
            workers = default_pool_size()
        if workers < 1:
            raise ValueError(f"pool size must be >= 1, got {workers}")

        self.workers = workers
        self.reporter: Reporter = reporter if reporter is not None else NullReporter()
        self.channel = Channel()

        self._pool: Optional[ThreadPoolExecutor] = None
        self._futures: List[Future] = []
        self._results: Optional[List[JobResult]] = None

    def start(self) -> None:
        if self._pool is not None:
            raise RuntimeError("coordinator already started")

        self._pool = ThreadPoolExecutor(
            max_workers=self.workers,
            thread_name_prefix="parexec-worker",
        )
        for i in range(self.workers):
            w = Worker(f"worker-{i}", self.channel, self.reporter)
            self._futures.append(self._pool.submit(w.run))

    def submit_all(self, graph: Iterable[Job]) -> int:
        """Hand every job to a worker, in graph order. Blocks while all workers are busy."""
        if self._pool is None:
            raise RuntimeError("coordinator not started")

        n = 0
        for job in graph:
            self.channel.send(job)
            n += 1
        return n

    def shutdown(self) -> None:
        """No more work will arrive."""
        self.channel.close()

    def join(self) -> List[JobResult]:
        if self._results is not None:
            return self._results
        if self._pool is None:
            raise RuntimeError("coordinator not started")

        wait(self._futures)
        self._pool.shutdown(wait=True)

        results: List[JobResult] = []
        for fut in self._futures:
            # re-raises anything that escaped a worker
            results.extend(fut.result())

        self._results = results
        return results

    def run(self, graph: Iterable[Job]) -> List[JobResult]:
        self.start()
        try:
            self.submit_all(graph)
        finally:
            self.shutdown()
        return self.join()

    def __enter__(self) -> Coordinator:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
        self.join()
