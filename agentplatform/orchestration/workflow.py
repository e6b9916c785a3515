"""Workflow engine - multi-step agent orchestration on top of the executor.

Three patterns:

- DAG workflows: steps declare dependencies; steps whose dependencies are all
  done run together in one parallel batch, and receive their dependencies'
  outputs as context (`dependency_0`, `dependency_0_role`, ...)
- chains: steps run one after another, each receiving `previous_output`
- fan-out/fan-in: one task on many roles, then an aggregator role
  synthesizes their outputs (`result_0`, `result_0_role`, ...)
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from agentplatform.models import TaskRequest, TaskResult
from agentplatform.utils.error_handler import ConfigValidationError

from .executor import ParallelAgentExecutor

LOGGER = logging.getLogger(__name__)

AGGREGATION_TASK = "Synthesize and summarize the following responses:"


@dataclass(frozen=True)
class WorkflowStep:
    name: str
    role: str
    task: str
    dependencies: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Workflow:
    name: str
    steps: Tuple[WorkflowStep, ...]


@dataclass(frozen=True)
class WorkflowResult:
    workflow_name: str
    status: str
    step_results: Dict[str, TaskResult] = field(default_factory=dict)
    error_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == "success"

    @classmethod
    def success(cls, workflow_name: str, step_results: Dict[str, TaskResult]) -> "WorkflowResult":
        return cls(workflow_name, "success", dict(step_results))

    @classmethod
    def failed(
        cls, workflow_name: str, error_message: str, step_results: Optional[Dict[str, TaskResult]] = None
    ) -> "WorkflowResult":
        return cls(workflow_name, "failed", dict(step_results or {}), error_message)


def topological_levels(steps: Sequence[WorkflowStep]) -> List[List[WorkflowStep]]:
    """Group steps into levels with Kahn's algorithm.

    Every step's dependencies sit in earlier levels; order within a level
    follows declaration order.

    Raises:
        ConfigValidationError: duplicate step names, unknown dependencies or a cycle
    """
    by_name: Dict[str, WorkflowStep] = {}
    for step in steps:
        if step.name in by_name:
            raise ConfigValidationError(f"Duplicate workflow step: {step.name}")
        by_name[step.name] = step

    in_degree: Dict[str, int] = {}
    dependents: Dict[str, List[str]] = {name: [] for name in by_name}
    for step in steps:
        unknown = [dep for dep in step.dependencies if dep not in by_name]
        if unknown:
            raise ConfigValidationError(f"Step '{step.name}' depends on unknown step(s): {unknown}")
        in_degree[step.name] = len(set(step.dependencies))
        for dependency in set(step.dependencies):
            dependents[dependency].append(step.name)

    levels: List[List[WorkflowStep]] = []
    ready = deque(step.name for step in steps if in_degree[step.name] == 0)
    placed = 0
    while ready:
        level = [by_name[name] for name in ready]
        ready.clear()
        levels.append(level)
        placed += len(level)
        for step in level:
            for dependent in dependents[step.name]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    ready.append(dependent)

    if placed != len(by_name):
        raise ConfigValidationError("Workflow contains a cycle")
    return levels


class WorkflowEngine:
    """Execute workflows, chains and fan-out/fan-in patterns."""

    def __init__(self, executor: ParallelAgentExecutor) -> None:
        self._executor = executor

    def execute_workflow(self, workflow: Workflow) -> WorkflowResult:
        """Run a DAG workflow level by level.

        Raises:
            ConfigValidationError: malformed workflow (checked before anything runs)
        """
        LOGGER.info(f"Executing workflow: {workflow.name}")
        levels = topological_levels(workflow.steps)

        results: Dict[str, TaskResult] = {}
        for depth, level in enumerate(levels, start=1):
            LOGGER.debug(f"Workflow {workflow.name}: level {depth}/{len(levels)} ({[s.name for s in level]})")
            requests = [
                TaskRequest(step.role, step.task, self._dependency_context(step, results))
                for step in level
            ]
            for step, result in zip(level, self._executor.execute_parallel(requests)):
                results[step.name] = result

            failed = [step.name for step in level if not results[step.name].success]
            if failed:
                LOGGER.error(f"Workflow {workflow.name} failed at step(s): {failed}")
                return WorkflowResult.failed(workflow.name, f"Step failed: {', '.join(failed)}", results)

        return WorkflowResult.success(workflow.name, results)

    def execute_chain(self, steps: Sequence[WorkflowStep]) -> Optional[TaskResult]:
        """Run steps sequentially, passing each output on; stop at the first failure."""
        LOGGER.info(f"Executing agent chain with {len(steps)} steps")
        previous: Optional[TaskResult] = None
        for step in steps:
            context = {"previous_output": previous.output} if previous is not None else {}
            previous = self._executor.execute_parallel([TaskRequest(step.role, step.task, context)])[0]
            if not previous.success:
                LOGGER.error(f"Chain execution failed at step: {step.name}")
                return previous
        return previous

    def execute_fan_out_fan_in(self, task: str, roles: Sequence[str], aggregator_role: str) -> TaskResult:
        """Run `task` on every role in parallel, then have the aggregator summarize."""
        LOGGER.info(f"Executing fan-out/fan-in with {len(roles)} roles")
        fan_out = self._executor.execute_parallel([TaskRequest(role, task) for role in roles])

        context: Dict[str, object] = {}
        for index, result in enumerate(fan_out):
            context[f"result_{index}"] = result.output if result.success else f"[failed] {result.error_message}"
            context[f"result_{index}_role"] = result.agent_name

        return self._executor.execute_parallel([TaskRequest(aggregator_role, AGGREGATION_TASK, context)])[0]

    @staticmethod
    def _dependency_context(step: WorkflowStep, results: Dict[str, TaskResult]) -> Dict[str, object]:
        context: Dict[str, object] = {}
        for index, dependency in enumerate(step.dependencies):
            result = results[dependency]
            context[f"dependency_{index}"] = result.output
            context[f"dependency_{index}_role"] = result.agent_name
        return context
