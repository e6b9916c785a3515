"""Unified error handling for the agent platform.

Three kinds of errors exist:

- caller errors (unknown agent/domain name): raised to the immediate caller
- configuration errors (bad manifest or agent definition): raised at load time,
  isolated to the offending file or domain by the loaders
- execution errors (completion failure, template error, timeout): never raised
  past the dispatcher or executor, always turned into a failed TaskResult
"""

from __future__ import annotations

import functools
import logging
import time
from pathlib import Path
from typing import Callable, Iterable, Optional

from agentplatform.models import TaskRequest, TaskResult

LOGGER = logging.getLogger(__name__)


class AgentPlatformError(Exception):
    """Base exception for agent platform errors."""

    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message


class AgentNotFoundError(AgentPlatformError, LookupError):
    """An agent name is not registered."""

    def __init__(self, agent_name: str, available: Iterable[str] = ()):
        available = list(available)
        super().__init__(
            f"Unknown agent: {agent_name}. Available agents: {available}",
            user_message=f"Agent '{agent_name}' does not exist",
        )
        self.agent_name = agent_name
        self.available = available


class DomainNotFoundError(AgentPlatformError, LookupError):
    """A domain name is not loaded."""

    def __init__(self, domain_name: str):
        super().__init__(f"Domain not found: {domain_name}")
        self.domain_name = domain_name


class ConfigValidationError(AgentPlatformError, ValueError):
    """Malformed domain manifest, agent definition or workflow."""

    def __init__(self, message: str, source: Optional[Path | str] = None):
        if source is not None:
            message = f"{message} ({source})"
        super().__init__(message)
        self.source = source


class TaskExecutionError(AgentPlatformError):
    """A single task failed while executing."""


class ExecutorShutdownError(AgentPlatformError, RuntimeError):
    """Work was submitted to an executor that has been shut down."""


def task_error_boundary(stage: str) -> Callable:
    """Decorator converting unexpected exceptions into failed TaskResults.

    Wraps a callable whose first argument (after `self`, for methods) is a
    TaskRequest and which returns a TaskResult. Every exception is converted,
    including an AgentNotFoundError raised inside the agent; callers look the
    agent up before entering the boundary, so caller errors never reach it.

    Args:
        stage: Name used in log lines (e.g. "dispatcher", "executor")

    Example:
        @task_error_boundary("executor")
        def _run(self, request: TaskRequest) -> TaskResult:
            ...
    """

    def decorator(func: Callable[..., TaskResult]) -> Callable[..., TaskResult]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> TaskResult:
            request = next((arg for arg in args if isinstance(arg, TaskRequest)), None)
            if request is None:
                request = kwargs.get("request")
            started = time.monotonic()
            try:
                return func(*args, **kwargs)
            except Exception as e:
                LOGGER.exception(f"{stage}: task for agent {getattr(request, 'agent_name', '?')} failed")
                if request is None:
                    raise
                return TaskResult.failed(
                    request.agent_name,
                    request.task,
                    f"Execution failed: {e}" if str(e) else f"Execution failed: {type(e).__name__}",
                    duration_ms=int((time.monotonic() - started) * 1000),
                )

        return wrapper

    return decorator


__all__ = [
    "AgentPlatformError",
    "AgentNotFoundError",
    "DomainNotFoundError",
    "ConfigValidationError",
    "TaskExecutionError",
    "ExecutorShutdownError",
    "task_error_boundary",
]
