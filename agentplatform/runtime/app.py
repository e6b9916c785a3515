"""Runtime assembly for the agent platform."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from agentplatform.agents import Agent, AgentRegistry
from agentplatform.completion import CompletionProvider, build_completion_provider
from agentplatform.config import Settings, get_settings, resolve_project_path
from agentplatform.domains import DomainHealth, DomainLoader, DomainManager
from agentplatform.formatters import OutputFormatterRegistry
from agentplatform.models import AgentInfo, TaskRequest, TaskResult
from agentplatform.orchestration import ParallelAgentExecutor, RoleManager, WorkflowEngine
from agentplatform.template import PromptTemplateEngine
from agentplatform.utils.logging_utils import setup_logging

LOGGER = logging.getLogger(__name__)


class AgentPlatform:
    """Wired platform components plus the operations front-ends call."""

    def __init__(
        self,
        settings: Settings,
        completion_provider: CompletionProvider,
        agent_registry: AgentRegistry,
        formatter_registry: OutputFormatterRegistry,
        template_engine: PromptTemplateEngine,
        domain_loader: DomainLoader,
        domain_manager: DomainManager,
        role_manager: RoleManager,
        executor: ParallelAgentExecutor,
        workflow_engine: WorkflowEngine,
    ) -> None:
        self.settings = settings
        self.completion_provider = completion_provider
        self.agent_registry = agent_registry
        self.formatter_registry = formatter_registry
        self.template_engine = template_engine
        self.domain_loader = domain_loader
        self.domain_manager = domain_manager
        self.role_manager = role_manager
        self.executor = executor
        self.workflow_engine = workflow_engine

    # ========== Startup ==========

    def initialize_domains(self) -> int:
        """Load every domain under the configured domains path.

        Returns:
            Number of agents registered (0 when the plugin system is disabled)
        """
        if not self.settings.domains.plugin_enabled:
            LOGGER.info("Domain plugin system disabled, skipping domain loading")
            return 0

        domains_path = resolve_project_path(self.settings.domains.domains_path)
        LOGGER.info(f"Initializing domains from: {domains_path}")
        total = self.domain_manager.load_all_domains(domains_path, self.completion_provider)
        LOGGER.info(f"Domain initialization complete: {total} agents from {self.domain_manager.domain_count()} domain(s)")
        self.agent_registry.validate()
        return total

    # ========== Agents ==========

    def register_agent(self, agent: Agent) -> Optional[Agent]:
        return self.agent_registry.register(agent)

    def get_agent(self, name: str) -> Agent:
        return self.agent_registry.get(name)

    def has_agent(self, name: str) -> bool:
        return self.agent_registry.has(name)

    def list_agents(self) -> List[AgentInfo]:
        return self.agent_registry.list_info()

    # ========== Execution ==========

    def execute_task(self, request: TaskRequest) -> TaskResult:
        return self.role_manager.execute_task(request)

    def execute_multi_agent_task(
        self,
        agent_names: Sequence[str],
        task: str,
        context: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, TaskResult]:
        return self.role_manager.execute_multi_agent_task(agent_names, task, context)

    # ========== Domains ==========

    def load_domain(self, domain_path: Path | str, completion_provider: Optional[CompletionProvider] = None) -> int:
        return self.domain_manager.load_domain(domain_path, completion_provider or self.completion_provider)

    def load_all_domains(
        self, domains_path: Path | str, completion_provider: Optional[CompletionProvider] = None
    ) -> int:
        return self.domain_manager.load_all_domains(domains_path, completion_provider or self.completion_provider)

    def discover_domains(self, domains_path: Path | str) -> List[str]:
        return self.domain_manager.discover_domains(domains_path)

    def get_domain_health(self, domain_name: str) -> DomainHealth:
        return self.domain_manager.get_domain_health(domain_name)

    # ========== Lifecycle ==========

    def shutdown(self) -> None:
        LOGGER.info("Shutting down agent platform")
        self.executor.shutdown()

    def __enter__(self) -> "AgentPlatform":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()


def build_application(
    settings: Optional[Settings] = None,
    completion_provider: Optional[CompletionProvider] = None,
    *,
    configure_logging: bool = False,
    load_domains: bool = True,
) -> AgentPlatform:
    """Build the platform and, unless told otherwise, load configured domains.

    Args:
        settings: Settings to use (default: cached get_settings())
        completion_provider: Completion backend (default: built from settings.models)
        configure_logging: Install console/file handlers via setup_logging()
        load_domains: Run initialize_domains() before returning

    Raises:
        RuntimeError: no completion provider given and no API key configured
    """
    settings = settings or get_settings()

    if configure_logging:
        observability = settings.observability
        log_dir = resolve_project_path(observability.log_dir) if observability.log_to_file else None
        setup_logging(observability.log_level, log_dir)

    if completion_provider is None:
        completion_provider = build_completion_provider(settings.models)
    LOGGER.info(f"Completion provider: {completion_provider.provider_name} ({completion_provider.model})")

    # Built-in formats are registered before any agent can execute
    formatter_registry = OutputFormatterRegistry()
    LOGGER.info(f"Registered output formats: {formatter_registry.list_names()}")

    template_engine = PromptTemplateEngine()
    agent_registry = AgentRegistry()
    domain_loader = DomainLoader(
        agent_registry,
        formatter_registry,
        template_engine,
        manifest_file=settings.domains.manifest_file,
    )
    domain_manager = DomainManager(domain_loader, agent_registry)
    executor = ParallelAgentExecutor(
        agent_registry,
        timeout_seconds=settings.executor.task_timeout_seconds,
        shutdown_timeout_seconds=settings.executor.shutdown_timeout_seconds,
    )

    platform = AgentPlatform(
        settings=settings,
        completion_provider=completion_provider,
        agent_registry=agent_registry,
        formatter_registry=formatter_registry,
        template_engine=template_engine,
        domain_loader=domain_loader,
        domain_manager=domain_manager,
        role_manager=RoleManager(agent_registry),
        executor=executor,
        workflow_engine=WorkflowEngine(executor),
    )

    if load_domains:
        platform.initialize_domains()
    return platform
