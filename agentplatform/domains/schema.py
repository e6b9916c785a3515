"""Domain manifest schema and loaded-domain bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class DomainConfig(BaseModel):
    """Domain manifest (`domain.yaml`).

    Example:
        name: "software-engineering"
        version: "1.0.0"
        description: "Agents for software delivery teams"
        outputFormats: ["technical", "business"]
        agentDirectory: "agents/"
        enabled: true
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str
    version: str = "1.0.0"
    description: str = ""
    output_formats: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("outputFormats", "output_formats"),
    )
    agent_directory: str = Field(
        default="agents/",
        validation_alias=AliasChoices("agentDirectory", "agent_directory"),
    )
    dependencies: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    enabled: bool = True

    @field_validator("name", "agent_directory")
    @classmethod
    def _not_blank(cls, value: str, info) -> str:
        value = value.strip()
        if not value:
            raise ValueError(f"Domain {info.field_name} cannot be blank")
        return value

    @field_validator("output_formats", "dependencies", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    @property
    def display_name(self) -> str:
        return f"{self.name} v{self.version}"


class DomainHealth(str, Enum):
    """Health of a domain as seen by the DomainManager. Values are the wire strings."""

    NOT_LOADED = "NOT_LOADED"
    DISABLED = "DISABLED"
    NO_AGENTS = "NO_AGENTS"
    HEALTHY = "HEALTHY"


@dataclass(frozen=True)
class DomainMetadata:
    """Bookkeeping for one loaded domain."""

    config: DomainConfig
    path: str
    agent_count: int
    loaded_at: float
    enabled: bool
    # Names this domain registered; used to reverse the load on unload
    agent_names: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def name(self) -> str:
        return self.config.name

    def display_info(self) -> str:
        return f"{self.config.name} v{self.config.version} ({self.agent_count} agents)"
