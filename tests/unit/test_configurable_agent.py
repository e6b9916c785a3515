"""Tests for ConfigurableAgent prompt building and task execution."""

import pytest
from pydantic import ValidationError

from agentplatform.agents import NO_CONTEXT, ConfigurableAgent, render_context
from agentplatform.formatters import OutputFormatterRegistry
from agentplatform.models import AgentConfig, TaskRequest, TaskState
from agentplatform.template import PromptTemplateEngine

from tests.conftest import StubCompletionProvider


def test_executes_task_with_configured_parameters(make_agent, stub_provider):
    agent = make_agent(
        "Developer",
        temperature=0.3,
        max_tokens=512,
        prompt_template="You are a {role}. Task: {task}. Context: {context}",
    )

    result = agent.execute_task(TaskRequest("Developer", "X", {"lang": "Go"}))

    assert result.success is True
    assert result.output == "OK"
    assert result.error_message is None
    assert result.agent_name == "Developer"
    assert result.state is TaskState.COMPLETED
    prompt, temperature, max_tokens = stub_provider.calls[0]
    assert prompt == "You are a Developer. Task: X. Context: lang: Go\n"
    assert temperature == 0.3
    assert max_tokens == 512


def test_metadata_carries_usage(make_agent):
    result = make_agent().execute_task(TaskRequest("Developer", "X"))

    assert result.metadata["provider"] == "stub"
    assert result.metadata["model"] == "stub-model"
    assert result.metadata["input_tokens"] == 10
    assert result.metadata["output_tokens"] == 5
    assert result.metadata["total_tokens"] == 15
    assert result.metadata["estimated_cost"] == pytest.approx(0.001)


def test_empty_context_uses_sentinel(make_agent, stub_provider):
    agent = make_agent(prompt_template="{context}")
    agent.execute_task(TaskRequest("Developer", "X"))

    assert stub_provider.prompts[0] == NO_CONTEXT


def test_render_context_keeps_insertion_order():
    assert render_context({"b": 1, "a": 2}) == "b: 1\na: 2\n"
    assert render_context(None) == NO_CONTEXT


def test_output_is_formatted(make_agent):
    agent = make_agent(output_format="executive")

    result = agent.execute_task(TaskRequest("Developer", "X"))

    assert result.output == "## Executive Summary\n\nOK"


def test_unknown_format_falls_back_to_raw(make_agent):
    result = make_agent(output_format="nonexistent").execute_task(TaskRequest("Developer", "X"))

    assert result.success is True
    assert result.output == "OK"


def test_provider_error_becomes_failed_result(make_agent):
    provider = StubCompletionProvider(error=RuntimeError("rate limited"))
    agent = make_agent(provider=provider)

    result = agent.execute_task(TaskRequest("Developer", "X"))

    assert result.success is False
    assert result.output is None
    assert "rate limited" in result.error_message
    assert result.state is TaskState.FAILED


def test_none_completion_becomes_failed_result(make_agent):
    provider = StubCompletionProvider(reply_fn=lambda prompt: None)

    result = make_agent(provider=provider).execute_task(TaskRequest("Developer", "X"))

    assert result.success is False
    assert "no response" in result.error_message


def test_engine_blocks_rendered_before_placeholders(stub_provider, formatter_registry):
    config = AgentConfig(
        name="Developer",
        prompt_template="You are a {role}.{{#if language}} Use {{language}}.{{/if}} Task: {{task}}",
    )
    agent = ConfigurableAgent(config, stub_provider, formatter_registry, PromptTemplateEngine())

    with_language = agent.build_prompt("review", {"language": "Go"})
    without_language = agent.build_prompt("review")

    assert with_language == "You are a Developer. Use Go. Task: review"
    assert without_language == "You are a Developer. Task: review"


def test_agent_info(make_agent):
    agent = make_agent("QA", description="Tests", capabilities=["Testing"], output_format="technical")

    info = agent.agent_info()

    assert info.name == "QA"
    assert info.description == "Tests"
    assert info.capabilities == ["Testing"]
    assert info.output_format == "technical"


def test_capabilities_returns_a_copy(make_agent):
    agent = make_agent(capabilities=["A"])
    agent.capabilities.append("B")

    assert agent.capabilities == ["A"]


def test_config_accepts_camel_case_keys():
    config = AgentConfig.model_validate(
        {"name": "QA", "maxTokens": 100, "promptTemplate": "{task}", "outputFormat": "raw"}
    )

    assert config.max_tokens == 100
    assert config.prompt_template == "{task}"
    assert config.output_format == "raw"


@pytest.mark.parametrize(
    "data",
    [
        {"name": "  "},
        {"name": "QA", "temperature": 1.5},
        {"name": "QA", "maxTokens": 0},
    ],
)
def test_config_rejects_invalid_values(data):
    with pytest.raises(ValidationError):
        AgentConfig.model_validate(data)


def test_config_is_immutable():
    config = AgentConfig(name="QA")

    with pytest.raises(ValidationError):
        config.name = "Other"


def test_formatter_registry_is_shared(stub_provider):
    registry = OutputFormatterRegistry()
    agent = ConfigurableAgent(AgentConfig(name="QA", output_format="shout"), stub_provider, registry)
    registry.register("shout", lambda c: c.content.upper() + "!")

    assert agent.execute_task(TaskRequest("QA", "x")).output == "OK!"


def test_developer_review_scenario(make_agent, stub_provider):
    agent = make_agent("Developer", prompt_template="You are a {role}. Task: {task}", output_format="raw")

    result = agent.execute_task(TaskRequest("Developer", "review", {}))

    assert result.success is True
    assert result.output == "OK"
    assert result.agent_name == "Developer"
    assert stub_provider.prompts == ["You are a Developer. Task: review"]
