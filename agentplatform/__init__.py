"""Domain-pluggable multi-agent orchestration platform."""

from agentplatform.models import AgentConfig, AgentInfo, Completion, TaskRequest, TaskResult, TaskState
from agentplatform.runtime import AgentPlatform, build_application

__version__ = "0.1.0"

__all__ = [
    "AgentConfig",
    "AgentInfo",
    "Completion",
    "TaskRequest",
    "TaskResult",
    "TaskState",
    "AgentPlatform",
    "build_application",
]
