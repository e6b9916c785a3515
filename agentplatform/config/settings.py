"""Environment-bound configuration objects.

This module provides Pydantic BaseSettings-based configuration loading from .env files.
All settings classes automatically load from environment variables with support for
multiple alias names (e.g., MODEL_ID and MODEL_NAME both work).

Example:
    from agentplatform.config.settings import get_settings

    settings = get_settings()  # Cached singleton
    domains_path = settings.domains.domains_path
    timeout = settings.executor.task_timeout_seconds
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


load_dotenv()


class ModelSettings(BaseSettings):
    """Completion backend identifiers, credentials and pricing.

    The platform only needs one completion capability; these values are used by
    `agentplatform.completion.model_resolver` to build a LangChain chat model.
    Cost fields are USD per 1K tokens and only feed the cost estimate reported in
    task metadata.
    """

    model: str = Field(
        default="gpt-4o-mini",
        validation_alias=AliasChoices("MODEL_ID", "MODEL_NAME"),
    )
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("MODEL_API_KEY", "OPENAI_API_KEY"),
    )
    base_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("MODEL_BASE_URL", "OPENAI_BASE_URL"),
    )
    provider: str = Field(default="openai", validation_alias=AliasChoices("MODEL_PROVIDER"))
    input_cost_per_1k: float = Field(default=0.0, ge=0.0, validation_alias=AliasChoices("MODEL_INPUT_COST_PER_1K"))
    output_cost_per_1k: float = Field(default=0.0, ge=0.0, validation_alias=AliasChoices("MODEL_OUTPUT_COST_PER_1K"))
    request_timeout: float = Field(default=60.0, gt=0, validation_alias=AliasChoices("MODEL_REQUEST_TIMEOUT"))

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class DomainSettings(BaseSettings):
    """Domain plugin discovery.

    - domains_path: directory whose immediate subdirectories are domains
    - plugin_enabled: load domains at startup (AGENTS_DOMAIN_PLUGIN_ENABLED)
    - manifest_file: manifest name expected in each domain directory
    """

    domains_path: str = Field(default="domains", validation_alias=AliasChoices("AGENTS_DOMAINS_PATH", "DOMAINS_PATH"))
    plugin_enabled: bool = Field(default=True, validation_alias=AliasChoices("AGENTS_DOMAIN_PLUGIN_ENABLED"))
    manifest_file: str = Field(default="domain.yaml", validation_alias=AliasChoices("AGENTS_DOMAIN_MANIFEST"))

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class ExecutorSettings(BaseSettings):
    """Parallel execution limits.

    - task_timeout_seconds: global deadline for one parallel batch (default 5 minutes)
    - shutdown_timeout_seconds: grace period for in-flight work on shutdown
    """

    task_timeout_seconds: float = Field(default=300.0, gt=0, alias="EXECUTOR_TASK_TIMEOUT")
    shutdown_timeout_seconds: float = Field(default=30.0, ge=0, alias="EXECUTOR_SHUTDOWN_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class ObservabilitySettings(BaseSettings):
    """Logging configuration."""

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="logs", alias="LOG_DIR")
    # File logging is opt-in so library users don't get a logs/ directory created
    log_to_file: bool = Field(default=False, alias="LOG_TO_FILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class Settings(BaseSettings):
    """Root application settings loaded from .env file.

    Hierarchical structure containing four nested settings groups:
    - models: Completion backend (ModelSettings)
    - domains: Domain plugin discovery (DomainSettings)
    - executor: Parallel execution limits (ExecutorSettings)
    - observability: Logging (ObservabilitySettings)

    Use get_settings() to obtain a cached singleton instance; components take
    the values they need through their constructors.
    """

    environment: str = Field(default="dev", alias="APP_ENV")
    models: ModelSettings = Field(default_factory=ModelSettings)
    domains: DomainSettings = Field(default_factory=DomainSettings)
    executor: ExecutorSettings = Field(default_factory=ExecutorSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        case_sensitive=False,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton Settings instance.

    Returns:
        Settings: Cached application settings instance
    """
    return Settings()
