"""Parallel agent executor.

Runs independent task requests concurrently on worker threads under one batch
deadline. Results always come back in submission order, one per request:

- a task that raises, or names an unknown agent, fails on its own
- when the deadline passes, tasks still queued are cancelled (CANCELLED) and
  tasks still running are reported as TIMED_OUT; results already collected are
  kept

Every batch runs on its own pool, sized to the batch (or to the caller's
concurrency limit). Worker threads cannot be interrupted, so a timed-out task
keeps running in the background until its completion call returns; its late
result is discarded and its pool's threads exit afterwards. Stragglers never
occupy workers needed by a later batch.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from threading import Lock
from typing import Callable, Iterable, List, Optional, Set, TypeVar

from agentplatform.agents import AgentRegistry
from agentplatform.models import TaskRequest, TaskResult, TaskState
from agentplatform.utils.error_handler import AgentNotFoundError, ExecutorShutdownError, task_error_boundary
from agentplatform.utils.logging_utils import log_batch_summary

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 300.0
SHUTDOWN_TIMEOUT_SECONDS = 30.0

R = TypeVar("R")


class ParallelAgentExecutor:
    """Concurrent executor for agent tasks with a batch deadline."""

    def __init__(
        self,
        agent_registry: AgentRegistry,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        shutdown_timeout_seconds: float = SHUTDOWN_TIMEOUT_SECONDS,
    ) -> None:
        self._agent_registry = agent_registry
        self.timeout_seconds = timeout_seconds
        self.shutdown_timeout_seconds = shutdown_timeout_seconds
        self._lock = Lock()
        self._accepting = True
        self._in_flight: Set[Future] = set()
        self._pools: Set[ThreadPoolExecutor] = set()

    # ========== Execution ==========

    def execute_parallel(self, tasks: Iterable[TaskRequest], timeout: Optional[float] = None) -> List[TaskResult]:
        """Run all tasks at once, one worker per task, under one deadline.

        Raises:
            ExecutorShutdownError: shutdown() was already called
        """
        tasks = list(tasks)
        LOGGER.info(f"Executing {len(tasks)} tasks in parallel")
        return self._run_batch(tasks, self._resolve_timeout(timeout), max_workers=len(tasks), prefix="agent-exec")

    def execute_parallel_with_limit(
        self,
        tasks: Iterable[TaskRequest],
        max_concurrency: int,
        timeout: Optional[float] = None,
    ) -> List[TaskResult]:
        """Run tasks on a dedicated pool of `max_concurrency` workers.

        The pool lives for this call only and is shut down before returning.
        """
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")

        tasks = list(tasks)
        LOGGER.info(f"Executing {len(tasks)} tasks with max concurrency of {max_concurrency}")
        return self._run_batch(
            tasks,
            self._resolve_timeout(timeout),
            max_workers=min(max_concurrency, len(tasks)),
            prefix="agent-limited",
        )

    def execute_batched(
        self,
        tasks: Iterable[TaskRequest],
        batch_size: int,
        timeout: Optional[float] = None,
    ) -> List[TaskResult]:
        """Run tasks in sequential batches, each batch in parallel."""
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")

        tasks = list(tasks)
        total_batches = (len(tasks) + batch_size - 1) // batch_size
        LOGGER.info(f"Executing {len(tasks)} tasks in batches of {batch_size}")

        results: List[TaskResult] = []
        for index in range(0, len(tasks), batch_size):
            LOGGER.debug(f"Processing batch {index // batch_size + 1}/{total_batches}")
            results.extend(self.execute_parallel(tasks[index:index + batch_size], timeout=timeout))
        return results

    def execute_and_aggregate(
        self,
        tasks: Iterable[TaskRequest],
        aggregator: Callable[[List[TaskResult]], R],
        timeout: Optional[float] = None,
    ) -> R:
        return aggregator(self.execute_parallel(tasks, timeout=timeout))

    # ========== Lifecycle ==========

    def shutdown(self) -> None:
        """Stop accepting work; give in-flight tasks a grace period, then cancel the rest."""
        with self._lock:
            if not self._accepting:
                return
            self._accepting = False
            pending = list(self._in_flight)

        LOGGER.info("Shutting down parallel executor")
        _, not_done = wait(pending, timeout=self.shutdown_timeout_seconds)
        if not_done:
            LOGGER.warning(f"{len(not_done)} task(s) still running after {self.shutdown_timeout_seconds:g}s, forcing shutdown")

        with self._lock:
            pools = list(self._pools)
        for pool in pools:
            pool.shutdown(wait=False, cancel_futures=True)

    @property
    def is_shutdown(self) -> bool:
        with self._lock:
            return not self._accepting

    def __enter__(self) -> "ParallelAgentExecutor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    # ========== Internals ==========

    def _resolve_timeout(self, timeout: Optional[float]) -> float:
        return self.timeout_seconds if timeout is None else timeout

    def _run_batch(
        self,
        tasks: List[TaskRequest],
        timeout: float,
        max_workers: int,
        prefix: str,
    ) -> List[TaskResult]:
        if not tasks:
            return []

        started = time.monotonic()
        pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=prefix)
        results: List[TaskResult] = []
        try:
            futures = self._submit_all(pool, tasks)

            _, not_done = wait(futures, timeout=timeout)
            if not_done:
                LOGGER.error(f"Parallel execution timed out after {timeout:g}s: {len(not_done)} task(s) unfinished")

            results = [self._collect(request, future, timeout) for request, future in zip(tasks, futures)]
            log_batch_summary(LOGGER, results, int((time.monotonic() - started) * 1000))
            return results
        finally:
            with self._lock:
                self._pools.discard(pool)
            # Don't block on stragglers after a timeout; their threads exit when they finish
            pool.shutdown(wait=not any(result.timed_out for result in results), cancel_futures=True)

    def _submit_all(self, pool: ThreadPoolExecutor, tasks: List[TaskRequest]) -> List[Future]:
        # The whole batch is accepted or rejected at once
        with self._lock:
            if not self._accepting:
                raise ExecutorShutdownError("Executor has been shut down; no new tasks accepted")
            self._pools.add(pool)
            futures = [pool.submit(self._execute_task, request) for request in tasks]
            self._in_flight.update(futures)

        for future in futures:
            future.add_done_callback(self._discard)
        return futures

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._in_flight.discard(future)

    def _collect(self, request: TaskRequest, future: Future, timeout: float) -> TaskResult:
        if not future.done():
            if future.cancel():
                return TaskResult.from_timeout(request.agent_name, request.task, timeout, started=False)
            if not future.done():
                return TaskResult.from_timeout(request.agent_name, request.task, timeout, started=True)

        if future.cancelled():
            return TaskResult.failed(
                request.agent_name, request.task, "Task cancelled: executor shut down", state=TaskState.CANCELLED
            )

        try:
            return future.result()
        except Exception as e:
            LOGGER.error(f"Failed to get task result for agent {request.agent_name}: {e}")
            return TaskResult.failed(request.agent_name, request.task, f"Task execution failed: {e}")

    def _execute_task(self, request: TaskRequest) -> TaskResult:
        LOGGER.debug(f"Executing task for agent: {request.agent_name}")
        try:
            agent = self._agent_registry.get(request.agent_name)
        except AgentNotFoundError:
            return TaskResult.failed(request.agent_name, request.task, f"Agent not found: {request.agent_name}")
        return self._run(agent, request)

    @staticmethod
    @task_error_boundary("executor")
    def _run(agent, request: TaskRequest) -> TaskResult:
        return agent.execute_task(request)
