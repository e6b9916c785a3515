"""Domain manager - loaded-domain bookkeeping on top of the DomainLoader.

Tracks which agents each domain registered, so unloading a domain removes its
agents from the registry. An agent is only removed if the registry still holds
the instance this domain registered; when another domain has since replaced a
name, that newer agent stays.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from threading import RLock
from typing import Dict, List, Optional, Tuple

from agentplatform.agents import Agent, AgentRegistry
from agentplatform.completion import CompletionProvider
from agentplatform.utils.error_handler import DomainNotFoundError

from .loader import DomainLoader, DomainLoadReport, list_subdirectories
from .schema import DomainHealth, DomainMetadata

LOGGER = logging.getLogger(__name__)


class DomainManager:
    """Load, reload, unload and inspect domains."""

    def __init__(self, domain_loader: DomainLoader, agent_registry: AgentRegistry) -> None:
        self._domain_loader = domain_loader
        self._agent_registry = agent_registry
        self._domains: Dict[str, DomainMetadata] = {}
        self._owned_agents: Dict[str, Tuple[Agent, ...]] = {}
        self._lock = RLock()

    # ========== Lifecycle ==========

    def load_domain(self, domain_path: Path | str, completion_provider: CompletionProvider) -> int:
        """Load a domain and record its metadata.

        Raises:
            ConfigValidationError: invalid manifest (nothing is recorded)
        """
        report = self._domain_loader.load_domain_report(domain_path, completion_provider)
        metadata = self._record(report)
        LOGGER.info(f"Domain '{metadata.name}' loaded: {metadata.display_info()}")
        return metadata.agent_count

    def load_all_domains(self, domains_path: Path | str, completion_provider: CompletionProvider) -> int:
        """Load every domain under `domains_path`, continuing past failures."""
        reports = self._domain_loader.load_all_domain_reports(domains_path, completion_provider)
        return sum(self._record(report).agent_count for report in reports)

    def reload_domain(self, domain_name: str, completion_provider: CompletionProvider) -> int:
        """Unload then load a domain from its recorded path.

        Raises:
            DomainNotFoundError: the domain is not loaded
        """
        LOGGER.info(f"Reloading domain: {domain_name}")
        metadata = self._require(domain_name)
        self.unload_domain(domain_name)
        return self.load_domain(metadata.path, completion_provider)

    def unload_domain(self, domain_name: str) -> int:
        """Forget a domain and deregister the agents it registered.

        Returns:
            Number of agents removed from the registry

        Raises:
            DomainNotFoundError: the domain is not loaded
        """
        LOGGER.info(f"Unloading domain: {domain_name}")
        with self._lock:
            if domain_name not in self._domains:
                raise DomainNotFoundError(domain_name)
            del self._domains[domain_name]
            owned = self._owned_agents.pop(domain_name, ())

        removed = sum(1 for agent in owned if self._agent_registry.unregister(agent.name, expected=agent))
        if removed < len(owned):
            LOGGER.info(f"{len(owned) - removed} agent(s) of '{domain_name}' were replaced by other domains and kept")
        LOGGER.info(f"Domain '{domain_name}' unloaded: {removed} agents removed")
        return removed

    # ========== Discovery ==========

    def discover_domains(self, domains_path: Path | str) -> List[str]:
        """List subdirectories of `domains_path` that contain a domain manifest.

        A missing base directory yields an empty list.
        """
        base = Path(domains_path)
        LOGGER.info(f"Discovering domains in: {base}")
        if not base.is_dir():
            LOGGER.warning(f"Domains directory not found: {base}")
            return []

        domains = [
            str(path) for path in list_subdirectories(base)
            if self._domain_loader.manifest_path(path) is not None
        ]
        LOGGER.info(f"Discovered {len(domains)} domain(s)")
        return domains

    # ========== Queries ==========

    def loaded_domains(self) -> List[str]:
        with self._lock:
            return sorted(self._domains)

    def get_domain_metadata(self, domain_name: str) -> Optional[DomainMetadata]:
        with self._lock:
            return self._domains.get(domain_name)

    def all_domain_metadata(self) -> Dict[str, DomainMetadata]:
        with self._lock:
            return dict(self._domains)

    def is_domain_loaded(self, domain_name: str) -> bool:
        with self._lock:
            return domain_name in self._domains

    def domain_count(self) -> int:
        with self._lock:
            return len(self._domains)

    def total_agent_count(self) -> int:
        with self._lock:
            return sum(metadata.agent_count for metadata in self._domains.values())

    def get_domain_health(self, domain_name: str) -> DomainHealth:
        metadata = self.get_domain_metadata(domain_name)
        if metadata is None:
            return DomainHealth.NOT_LOADED
        if not metadata.enabled:
            return DomainHealth.DISABLED
        if metadata.agent_count == 0:
            return DomainHealth.NO_AGENTS
        return DomainHealth.HEALTHY

    # ========== Internals ==========

    def _record(self, report: DomainLoadReport) -> DomainMetadata:
        metadata = DomainMetadata(
            config=report.config,
            path=str(report.path),
            agent_count=report.agent_count,
            loaded_at=time.time(),
            enabled=report.config.enabled,
            agent_names=report.agent_names,
        )
        name = report.config.name
        with self._lock:
            previous = self._domains.get(name)
            if previous is not None and previous.path != metadata.path:
                LOGGER.warning(
                    f"Domain '{name}' from {metadata.path} replaces the one loaded from {previous.path}; "
                    f"agents of both stay owned by '{name}'"
                )
            elif previous is not None:
                LOGGER.warning(f"Domain '{name}' was already loaded; replacing its metadata")
            self._domains[name] = metadata
            # Keep earlier registrations so unload can still remove them
            owned = list(self._owned_agents.get(name, ()))
            owned.extend(agent for agent in report.agents if not any(agent is known for known in owned))
            self._owned_agents[name] = tuple(owned)
        return metadata

    def _require(self, domain_name: str) -> DomainMetadata:
        metadata = self.get_domain_metadata(domain_name)
        if metadata is None:
            raise DomainNotFoundError(domain_name)
        return metadata
