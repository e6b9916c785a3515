"""Agent Registry - concurrent name -> agent catalog.

Registering a name that already exists replaces the previous agent (last
writer wins). All operations take an internal lock, so callers never need
their own synchronization.
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import Dict, List, Optional

from agentplatform.models import AgentInfo
from agentplatform.utils.error_handler import AgentNotFoundError

from .configurable import Agent

LOGGER = logging.getLogger(__name__)


class AgentRegistry:
    """Thread-safe agent catalog keyed by agent name."""

    def __init__(self) -> None:
        self._agents: Dict[str, Agent] = {}
        self._lock = RLock()

    # ========== Registration ==========

    def register(self, agent: Agent) -> Optional[Agent]:
        """Register an agent, replacing any agent with the same name.

        Returns:
            The agent previously registered under that name, if any
        """
        name = agent.name
        with self._lock:
            previous = self._agents.get(name)
            self._agents[name] = agent
        if previous is not None and previous is not agent:
            LOGGER.info(f"Replaced agent: {name}")
        else:
            LOGGER.info(f"Registered agent: {name}")
        return previous

    def unregister(self, name: str, expected: Optional[Agent] = None) -> bool:
        """Remove an agent.

        Args:
            name: Agent name
            expected: Only remove if this exact instance is still registered

        Returns:
            True if an agent was removed
        """
        with self._lock:
            current = self._agents.get(name)
            if current is None or (expected is not None and current is not expected):
                return False
            del self._agents[name]
        LOGGER.info(f"Unregistered agent: {name}")
        return True

    # ========== Queries ==========

    def get(self, name: str) -> Agent:
        """Return the agent registered under `name`.

        Raises:
            AgentNotFoundError: no such agent; the message lists available agents
        """
        with self._lock:
            agent = self._agents.get(name)
            if agent is None:
                raise AgentNotFoundError(name, sorted(self._agents))
            return agent

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._agents

    def list_names(self) -> List[str]:
        with self._lock:
            return sorted(self._agents)

    def list_info(self) -> List[AgentInfo]:
        with self._lock:
            agents = list(self._agents.values())
        return sorted((agent.agent_info() for agent in agents), key=lambda info: info.name)

    def count(self) -> int:
        with self._lock:
            return len(self._agents)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def validate(self) -> int:
        """Log the registry contents; warn when nothing is registered."""
        count = self.count()
        LOGGER.info(f"Registry validation: {count} agents registered")
        if count == 0:
            LOGGER.warning("No agents registered! Check your domain configuration.")
        for name in self.list_names():
            LOGGER.debug(f"  - {name}")
        return count
