"""Value objects shared across the platform."""

from .agent import DEFAULT_PROMPT_TEMPLATE, AgentConfig, AgentInfo
from .completion import Completion
from .task import TaskRequest, TaskResult, TaskState

__all__ = [
    "DEFAULT_PROMPT_TEMPLATE",
    "AgentConfig",
    "AgentInfo",
    "Completion",
    "TaskRequest",
    "TaskResult",
    "TaskState",
]
