"""Domain loader - builds agents from domain plugin directories.

Expected layout:

    <domains_path>/
      <domain>/
        domain.yaml          manifest (DomainConfig)
        agents/              manifest.agentDirectory, scanned non-recursively
          developer.yaml     one AgentConfig per file
          qa.yaml

Errors are isolated: a broken agent file skips that agent, a broken domain
skips that domain when loading everything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import ValidationError

from agentplatform.agents import Agent, AgentRegistry, ConfigurableAgent, load_agent_configs, load_yaml_mapping
from agentplatform.completion import CompletionProvider
from agentplatform.formatters import OutputFormatterRegistry
from agentplatform.template import PromptTemplateEngine
from agentplatform.utils.error_handler import ConfigValidationError

from .schema import DomainConfig

LOGGER = logging.getLogger(__name__)

DEFAULT_MANIFEST_FILE = "domain.yaml"


@dataclass(frozen=True)
class DomainLoadReport:
    """What one load_domain call did."""

    config: DomainConfig
    path: Path
    agents: Tuple[Agent, ...] = ()

    @property
    def agent_count(self) -> int:
        return len(self.agents)

    @property
    def agent_names(self) -> Tuple[str, ...]:
        return tuple(agent.name for agent in self.agents)


class DomainLoader:
    """Reads domain manifests and registers their agents."""

    def __init__(
        self,
        agent_registry: AgentRegistry,
        formatter_registry: OutputFormatterRegistry,
        template_engine: Optional[PromptTemplateEngine] = None,
        manifest_file: str = DEFAULT_MANIFEST_FILE,
    ) -> None:
        self._agent_registry = agent_registry
        self._formatter_registry = formatter_registry
        self._template_engine = template_engine or PromptTemplateEngine()
        self.manifest_file = manifest_file

    # ========== Manifest ==========

    def manifest_path(self, domain_path: Path | str) -> Optional[Path]:
        """Return the manifest file of a domain directory, or None."""
        domain_dir = Path(domain_path)
        for candidate in (self.manifest_file, Path(self.manifest_file).with_suffix(".yml").name):
            path = domain_dir / candidate
            if path.is_file():
                return path
        return None

    def read_manifest(self, domain_path: Path | str) -> DomainConfig:
        """Parse and validate a domain manifest.

        Raises:
            ConfigValidationError: manifest missing, unreadable or invalid (e.g. no name)
        """
        path = self.manifest_path(domain_path)
        if path is None:
            raise ConfigValidationError("Domain manifest not found", source=Path(domain_path) / self.manifest_file)

        LOGGER.debug(f"Loading domain config from: {path}")
        data = load_yaml_mapping(path)
        try:
            return DomainConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid domain manifest: {e}", source=path) from e

    # ========== Loading ==========

    def load_domain(self, domain_path: Path | str, completion_provider: CompletionProvider) -> int:
        """Load one domain and return the number of agents registered.

        A disabled domain registers nothing and returns 0.

        Raises:
            ConfigValidationError: invalid manifest
        """
        return self.load_domain_report(domain_path, completion_provider).agent_count

    def load_domain_report(self, domain_path: Path | str, completion_provider: CompletionProvider) -> DomainLoadReport:
        """Same as load_domain, but report the config and the registered agents."""
        domain_dir = Path(domain_path)
        LOGGER.info(f"Loading domain from: {domain_dir}")

        config = self.read_manifest(domain_dir)
        if not config.enabled:
            LOGGER.info(f"Domain '{config.name}' is disabled, skipping load")
            return DomainLoadReport(config=config, path=domain_dir)

        LOGGER.info(f"Loading domain: {config.display_name} - {config.description}")
        self._check_output_formats(config)

        agent_configs = load_agent_configs(domain_dir / config.agent_directory)
        if not agent_configs:
            LOGGER.warning(f"No agents found in domain: {config.name}")
            return DomainLoadReport(config=config, path=domain_dir)

        agents: List[Agent] = []
        for agent_config in agent_configs:
            try:
                agent = ConfigurableAgent(
                    agent_config,
                    completion_provider,
                    self._formatter_registry,
                    self._template_engine,
                )
                previous = self._agent_registry.register(agent)
            except Exception as e:
                LOGGER.error(
                    f"Failed to create agent '{agent_config.name}' in domain '{config.name}': {e}",
                    exc_info=True,
                )
                continue
            if previous is not None and previous is not agent:
                LOGGER.warning(f"Agent '{agent_config.name}' from domain '{config.name}' replaced an existing agent")
            agents.append(agent)
            LOGGER.debug(f"Loaded agent: {agent_config.name} from domain: {config.name}")

        LOGGER.info(f"Domain '{config.name}' loaded successfully: {len(agents)} agents registered")
        return DomainLoadReport(config=config, path=domain_dir, agents=tuple(agents))

    def load_all_domains(self, domains_path: Path | str, completion_provider: CompletionProvider) -> int:
        """Load every immediate subdirectory of `domains_path` as a domain.

        A failing domain is logged and skipped.

        Returns:
            Total number of agents registered across all domains
        """
        return sum(report.agent_count for report in self.load_all_domain_reports(domains_path, completion_provider))

    def load_all_domain_reports(
        self, domains_path: Path | str, completion_provider: CompletionProvider
    ) -> List[DomainLoadReport]:
        base = Path(domains_path)
        LOGGER.info(f"Discovering domains in: {base}")
        if not base.is_dir():
            LOGGER.warning(f"Domains directory not found: {base}")
            return []

        domain_dirs = list_subdirectories(base)
        LOGGER.info(f"Found {len(domain_dirs)} potential domain(s) in: {base}")

        reports: List[DomainLoadReport] = []
        for domain_dir in domain_dirs:
            try:
                reports.append(self.load_domain_report(domain_dir, completion_provider))
            except Exception as e:
                LOGGER.error(f"Failed to load domain from {domain_dir}: {e}")

        total = sum(report.agent_count for report in reports)
        LOGGER.info(f"Domain loading complete: {total} total agents across all domains")
        return reports

    def _check_output_formats(self, config: DomainConfig) -> None:
        if not config.output_formats:
            LOGGER.debug(f"No output formats defined for domain: {config.name}")
            return

        LOGGER.info(f"Domain '{config.name}' defines output formats: {', '.join(config.output_formats)}")
        for format_name in config.output_formats:
            if not self._formatter_registry.has(format_name):
                LOGGER.warning(f"Output format '{format_name}' not registered. Using raw format as fallback.")


def list_subdirectories(base: Path) -> List[Path]:
    """Immediate subdirectories of `base`, sorted, hidden ones excluded."""
    return sorted(p for p in base.iterdir() if p.is_dir() and not p.name.startswith("."))
