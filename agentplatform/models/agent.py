"""Agent definition schema.

One `AgentConfig` stands in for every role: the behaviour of a configurable agent
is entirely described by this data, loaded from a YAML agent definition:

    name: "Developer"
    description: "Reviews and writes code"
    capabilities:
      - "Code review"
      - "Refactoring"
    temperature: 0.3
    maxTokens: 2048
    outputFormat: "technical"
    promptTemplate: |
      You are a {role}.
      Task: {task}
      Context: {context}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

DEFAULT_PROMPT_TEMPLATE = "You are a {role}.\n\nTask: {task}\n\nContext:\n{context}"


class AgentConfig(BaseModel):
    """Immutable agent definition.

    Accepts camelCase keys as written in YAML (maxTokens, promptTemplate,
    outputFormat) as well as the snake_case field names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str = Field(min_length=1)
    description: str = ""
    capabilities: List[str] = Field(default_factory=list)
    temperature: float = Field(default=0.7, ge=0.0, le=1.0)
    max_tokens: int = Field(
        default=2000,
        gt=0,
        validation_alias=AliasChoices("maxTokens", "max_tokens"),
    )
    prompt_template: str = Field(
        default=DEFAULT_PROMPT_TEMPLATE,
        min_length=1,
        validation_alias=AliasChoices("promptTemplate", "prompt_template"),
    )
    output_format: str = Field(
        default="raw",
        validation_alias=AliasChoices("outputFormat", "output_format"),
    )

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Agent name cannot be blank")
        return value

    @field_validator("capabilities", mode="before")
    @classmethod
    def _capabilities_as_list(cls, value):
        if value is None:
            return []
        return value


@dataclass(frozen=True, slots=True)
class AgentInfo:
    """Identity card reported by an agent (used by listings)."""

    name: str
    description: str
    capabilities: List[str] = field(default_factory=list)
    output_format: str = "raw"
