"""Task dispatcher (role manager).

Runs a task on one named agent, or fans the same task out to several agents
concurrently and joins the results into a map keyed by agent name.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Mapping, Optional, Sequence

from agentplatform.agents import AgentRegistry
from agentplatform.models import AgentInfo, TaskRequest, TaskResult
from agentplatform.utils.error_handler import AgentNotFoundError, task_error_boundary
from agentplatform.utils.logging_utils import log_task_result

LOGGER = logging.getLogger(__name__)


class RoleManager:
    """Dispatch tasks to agents looked up in the registry."""

    def __init__(self, agent_registry: AgentRegistry, max_fan_out: Optional[int] = None) -> None:
        self._agent_registry = agent_registry
        self._max_fan_out = max_fan_out

    def execute_task(self, request: TaskRequest) -> TaskResult:
        """Execute one task.

        Raises:
            AgentNotFoundError: the named agent is not registered
        """
        LOGGER.info(f"Executing task for agent: {request.agent_name}")
        agent = self._agent_registry.get(request.agent_name)
        result = self._run(agent, request)
        log_task_result(LOGGER, result)
        return result

    def execute_multi_agent_task(
        self,
        agent_names: Sequence[str],
        task: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, TaskResult]:
        """Run the same task on several agents concurrently.

        Every name is validated before anything runs; one unknown name aborts
        the whole request. Duplicate names run once.

        Raises:
            AgentNotFoundError: any name is not registered
        """
        names = list(dict.fromkeys(agent_names))
        if not names:
            return {}

        LOGGER.info(f"Executing multi-agent task with {len(names)} agents: {names}")
        agents = {}
        for name in names:
            try:
                agents[name] = self._agent_registry.get(name)
            except AgentNotFoundError as e:
                LOGGER.warning(f"Invalid multi-agent request: {e}")
                raise

        started = time.monotonic()
        workers = min(len(names), self._max_fan_out or len(names))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fan-out") as pool:
            futures = {
                name: pool.submit(self._run, agents[name], TaskRequest(name, task, context or {}))
                for name in names
            }
            results = {name: future.result() for name, future in futures.items()}

        LOGGER.info(f"Multi-agent task completed in {int((time.monotonic() - started) * 1000)}ms")
        return results

    def list_roles(self) -> List[str]:
        return self._agent_registry.list_names()

    def roles_info(self) -> List[AgentInfo]:
        return self._agent_registry.list_info()

    def describe_role(self, agent_name: str) -> AgentInfo:
        return self._agent_registry.get(agent_name).agent_info()

    @staticmethod
    @task_error_boundary("dispatcher")
    def _run(agent, request: TaskRequest) -> TaskResult:
        return agent.execute_task(request)
