"""Generic configurable agent.

One agent type represents every role: behaviour comes entirely from its
AgentConfig (prompt template, generation parameters, output format). New roles
need a YAML file, not code.

Usage:
    config = load_agent_config(Path("domains/software-engineering/agents/developer.yaml"))
    agent = ConfigurableAgent(config, completion_provider, formatter_registry)
    result = agent.execute_task(TaskRequest("Developer", "review this diff"))
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Mapping, Optional, Protocol, runtime_checkable

from agentplatform.completion import CompletionProvider
from agentplatform.formatters import OutputFormatterRegistry
from agentplatform.models import AgentConfig, AgentInfo, Completion, TaskRequest, TaskResult
from agentplatform.template import PromptTemplateEngine
from agentplatform.utils.error_handler import TaskExecutionError

LOGGER = logging.getLogger(__name__)

NO_CONTEXT = "No additional context provided."


@runtime_checkable
class Agent(Protocol):
    """What the registry and dispatcher need from an agent."""

    @property
    def name(self) -> str:
        ...

    @property
    def capabilities(self) -> List[str]:
        ...

    def execute_task(self, request: TaskRequest) -> TaskResult:
        ...

    def agent_info(self) -> AgentInfo:
        ...


def render_context(context: Optional[Mapping[str, Any]]) -> str:
    """Render a context map as `key: value` lines, or the no-context sentinel."""
    if not context:
        return NO_CONTEXT
    return "".join(f"{key}: {value}\n" for key, value in context.items())


class ConfigurableAgent:
    """Executes tasks for one declared role.

    Stateless after construction: safe to call `execute_task` from several
    threads at once.
    """

    def __init__(
        self,
        config: AgentConfig,
        completion_provider: CompletionProvider,
        formatter_registry: OutputFormatterRegistry,
        template_engine: Optional[PromptTemplateEngine] = None,
    ) -> None:
        self._config = config
        self._completion_provider = completion_provider
        self._formatter_registry = formatter_registry
        self._template_engine = template_engine or PromptTemplateEngine()
        LOGGER.debug(f"Initialized ConfigurableAgent: {config.name}")

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def description(self) -> str:
        return self._config.description

    @property
    def capabilities(self) -> List[str]:
        return list(self._config.capabilities)

    @property
    def config(self) -> AgentConfig:
        return self._config

    def agent_info(self) -> AgentInfo:
        return AgentInfo(
            name=self.name,
            description=self.description,
            capabilities=self.capabilities,
            output_format=self._config.output_format,
        )

    def execute_task(self, request: TaskRequest) -> TaskResult:
        """Render the prompt, call the completion provider, format the output.

        Never raises: any failure is returned as a failed TaskResult.
        """
        LOGGER.info(f"Executing task for agent: {self.name}")
        started = time.monotonic()
        try:
            prompt = self.build_prompt(request.task, request.context)
            completion = self._completion_provider.generate(
                prompt, self._config.temperature, self._config.max_tokens
            )
            if completion is None:
                raise TaskExecutionError("Completion provider returned no response")

            output = self._formatter_registry.format(completion, self._config.output_format)
            duration_ms = int((time.monotonic() - started) * 1000)
            LOGGER.info(f"Task completed successfully for agent: {self.name}")
            return TaskResult.succeeded(
                self.name,
                request.task,
                output,
                metadata=self._metadata(completion),
                duration_ms=duration_ms,
            )
        except Exception as e:
            LOGGER.error(f"Error executing task for agent {self.name}: {e}", exc_info=True)
            return TaskResult.failed(
                self.name,
                request.task,
                str(e) or type(e).__name__,
                duration_ms=int((time.monotonic() - started) * 1000),
            )

    def build_prompt(self, task: str, context: Optional[Mapping[str, Any]] = None) -> str:
        """Fill the configured template.

        `{{...}}` blocks go through the template engine first (variables: role,
        task, context and every context key); then the `{role}`, `{task}` and
        `{context}` placeholders are substituted.
        """
        template = self._config.prompt_template
        context_text = render_context(context)

        if "{{" in template:
            variables: Dict[str, Any] = dict(context or {})
            variables.update(role=self.name, task=task, context=context_text)
            template = self._template_engine.render(template, variables)

        prompt = (
            template.replace("{role}", self.name)
            .replace("{task}", task)
            .replace("{context}", context_text)
        )
        LOGGER.debug(f"Built prompt for agent {self.name}: {len(prompt)} characters")
        return prompt

    @staticmethod
    def _metadata(completion: Completion) -> Dict[str, Any]:
        return {
            "provider": completion.provider,
            "model": completion.model,
            "input_tokens": completion.input_tokens,
            "output_tokens": completion.output_tokens,
            "total_tokens": completion.total_tokens,
            "estimated_cost": completion.estimated_cost,
        }
