"""Agent definition loading utilities.

One YAML document per agent. Directories are scanned non-recursively for
`*.yaml` / `*.yml` files; a file that fails to parse is logged and skipped.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import yaml
from pydantic import ValidationError

from agentplatform.models import AgentConfig
from agentplatform.utils.error_handler import AgentNotFoundError, ConfigValidationError

LOGGER = logging.getLogger(__name__)

AGENT_FILE_SUFFIXES = (".yaml", ".yml")


def load_yaml_mapping(path: Path) -> dict:
    """Read a YAML file that must contain a mapping.

    Raises:
        ConfigValidationError: unreadable file, invalid YAML or non-mapping document
    """
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigValidationError(f"Cannot read YAML: {e}", source=path) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigValidationError("Expected a mapping at document root", source=path)
    return data


def load_agent_config(path: Path) -> AgentConfig:
    """Load one agent definition into `AgentConfig`.

    Raises:
        ConfigValidationError: the file is not a valid agent definition
    """
    data = load_yaml_mapping(path)
    try:
        return AgentConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid agent definition: {e}", source=path) from e


def iter_agent_files(directory: Path) -> List[Path]:
    if not directory.is_dir():
        return []
    return sorted(
        candidate for candidate in directory.iterdir()
        if candidate.is_file() and candidate.suffix.lower() in AGENT_FILE_SUFFIXES
    )


def load_agent_configs(directory: Path) -> List[AgentConfig]:
    """Load every agent definition in a directory, skipping broken files."""
    if not directory.exists():
        LOGGER.warning(f"Agent directory not found: {directory}")
        return []
    if not directory.is_dir():
        raise ConfigValidationError("Agent directory is not a directory", source=directory)

    configs: List[AgentConfig] = []
    for path in iter_agent_files(directory):
        try:
            config = load_agent_config(path)
        except ConfigValidationError as e:
            LOGGER.error(f"Failed to load agent config from {path.name}: {e}")
            continue
        configs.append(config)
        LOGGER.debug(f"Loaded agent config: {config.name} from {path.name}")

    LOGGER.info(f"Loaded {len(configs)} agent configurations from {directory}")
    return configs


def find_agent_config(directory: Path, agent_name: str) -> AgentConfig:
    """Return the definition named `agent_name` from a directory.

    Raises:
        AgentNotFoundError: no definition with that name
    """
    configs = load_agent_configs(directory)
    for config in configs:
        if config.name == agent_name:
            return config
    raise AgentNotFoundError(agent_name, sorted(config.name for config in configs))
