"""Task dispatch and concurrent orchestration."""

from .dispatcher import RoleManager
from .executor import ParallelAgentExecutor
from .workflow import Workflow, WorkflowEngine, WorkflowResult, WorkflowStep, topological_levels

__all__ = [
    "RoleManager",
    "ParallelAgentExecutor",
    "Workflow",
    "WorkflowEngine",
    "WorkflowResult",
    "WorkflowStep",
    "topological_levels",
]
