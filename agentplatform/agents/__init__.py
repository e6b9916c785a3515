"""Agents: the configurable agent, its definition loader and the registry."""

from .configurable import NO_CONTEXT, Agent, ConfigurableAgent, render_context
from .config_loader import find_agent_config, load_agent_config, load_agent_configs, load_yaml_mapping
from .registry import AgentRegistry

__all__ = [
    "NO_CONTEXT",
    "Agent",
    "ConfigurableAgent",
    "render_context",
    "find_agent_config",
    "load_agent_config",
    "load_agent_configs",
    "load_yaml_mapping",
    "AgentRegistry",
]
