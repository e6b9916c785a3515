"""Task request/result value objects shared by agents and orchestration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


class TaskState(str, Enum):
    """Lifecycle of one submitted task.

    PENDING -> RUNNING -> one of the terminal states. Every terminal state is
    represented by exactly one TaskResult.
    """

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self not in (TaskState.PENDING, TaskState.RUNNING)


def _freeze(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True, slots=True)
class TaskRequest:
    """One unit of work addressed to a named agent."""

    agent_name: str
    task: str
    context: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "context", _freeze(self.context))


@dataclass(frozen=True, slots=True)
class TaskResult:
    """Outcome of executing a TaskRequest.

    Exactly one of `output` / `error_message` is populated, controlled by
    `success`. Use the `succeeded()`, `failed()` and `from_timeout()` factories rather
    than the constructor.
    """

    agent_name: str
    task: str
    success: bool
    output: Optional[str] = None
    error_message: Optional[str] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)
    duration_ms: int = 0
    state: TaskState = TaskState.COMPLETED

    def __post_init__(self) -> None:
        if self.success:
            if self.output is None or self.error_message is not None:
                raise ValueError("successful TaskResult needs output and no error_message")
        elif not self.error_message or self.output is not None:
            raise ValueError("failed TaskResult needs an error_message and no output")
        object.__setattr__(self, "metadata", _freeze(self.metadata))

    @classmethod
    def succeeded(
        cls,
        agent_name: str,
        task: str,
        output: str,
        metadata: Optional[Mapping[str, Any]] = None,
        duration_ms: int = 0,
    ) -> "TaskResult":
        return cls(
            agent_name=agent_name,
            task=task,
            success=True,
            output=output,
            metadata=metadata or {},
            duration_ms=duration_ms,
            state=TaskState.COMPLETED,
        )

    @classmethod
    def failed(
        cls,
        agent_name: str,
        task: str,
        error_message: str,
        duration_ms: int = 0,
        state: TaskState = TaskState.FAILED,
    ) -> "TaskResult":
        return cls(
            agent_name=agent_name,
            task=task,
            success=False,
            error_message=error_message or "Unknown error",
            duration_ms=duration_ms,
            state=state,
        )

    @classmethod
    def from_timeout(
        cls,
        agent_name: str,
        task: str,
        timeout_seconds: float,
        started: bool = True,
    ) -> "TaskResult":
        """Failure produced when a batch deadline elapses before the task finished.

        Tasks that never started are reported as CANCELLED, tasks that were
        already running as TIMED_OUT; both messages mention the timeout.
        """
        if started:
            message = f"Task timed out after {timeout_seconds:g}s"
            state = TaskState.TIMED_OUT
        else:
            message = f"Task cancelled before start: batch timed out after {timeout_seconds:g}s"
            state = TaskState.CANCELLED
        return cls.failed(agent_name, task, message, duration_ms=int(timeout_seconds * 1000), state=state)

    @property
    def timed_out(self) -> bool:
        return self.state in (TaskState.TIMED_OUT, TaskState.CANCELLED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agent_name": self.agent_name,
            "task": self.task,
            "success": self.success,
            "output": self.output,
            "error_message": self.error_message,
            "metadata": dict(self.metadata),
            "duration_ms": self.duration_ms,
            "state": self.state.value,
        }
