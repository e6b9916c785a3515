"""Tests for output formatters and the formatter registry."""

import pytest

from agentplatform.formatters import (
    FormatKind,
    OutputFormatterRegistry,
    format_business,
    format_executive,
    format_technical,
)
from agentplatform.models import Completion


@pytest.fixture
def completion():
    return Completion(
        content="Result text",
        provider="openai",
        model="gpt-4o-mini",
        input_tokens=100,
        output_tokens=50,
        total_tokens=150,
        estimated_cost=0.0123,
    )


def test_technical_footer(completion):
    output = format_technical(completion)

    assert output.startswith("Result text")
    assert "**Technical Details**" in output
    assert "- Provider: openai" in output
    assert "- Model: gpt-4o-mini" in output
    assert "- Tokens: 150" in output


def test_business_summary(completion):
    output = format_business(completion)

    assert output.startswith("## Business Summary\n\nResult text")
    assert "- Estimated Cost: $0.0123" in output


def test_executive_has_no_details(completion):
    output = format_executive(completion)

    assert output == "## Executive Summary\n\nResult text"
    assert "Tokens" not in output
    assert "Cost" not in output


def test_builtins_registered_by_default():
    registry = OutputFormatterRegistry()

    assert registry.list_names() == ["business", "executive", "raw", "technical"]
    assert registry.count() == 4


def test_empty_registry():
    registry = OutputFormatterRegistry(register_builtins=False)
    assert registry.count() == 0


def test_raw_returns_content_unchanged(completion):
    assert OutputFormatterRegistry().format(completion, "raw") == "Result text"


@pytest.mark.parametrize("name", [None, "", "   ", "unknown-format"])
def test_fallback_to_raw(completion, name):
    assert OutputFormatterRegistry().format(completion, name) == "Result text"


def test_names_are_case_insensitive(completion):
    registry = OutputFormatterRegistry()

    assert registry.has("TECHNICAL")
    assert registry.format(completion, " Executive ") == format_executive(completion)


def test_raising_strategy_falls_back_to_raw(completion):
    registry = OutputFormatterRegistry()

    def broken(_completion):
        raise RuntimeError("boom")

    registry.register("broken", broken)

    assert registry.format(completion, "broken") == "Result text"


def test_custom_strategy_replaces_builtin(completion):
    registry = OutputFormatterRegistry()
    registry.register("technical", lambda c: f"custom:{c.content}")

    assert registry.format(completion, "technical") == "custom:Result text"
    assert registry.count() == 4


def test_register_rejects_invalid_input():
    registry = OutputFormatterRegistry()

    with pytest.raises(ValueError):
        registry.register("  ", lambda c: c.content)
    with pytest.raises(ValueError):
        registry.register("x", None)


def test_unregister():
    registry = OutputFormatterRegistry()

    assert registry.unregister("business") is True
    assert registry.unregister("business") is False
    assert not registry.has("business")


def test_none_completion_formats_to_empty():
    assert OutputFormatterRegistry().format(None, "technical") == ""


def test_format_kind_from_name():
    assert FormatKind.from_name("Business") is FormatKind.BUSINESS
    assert FormatKind.from_name("custom") is None
    assert FormatKind.from_name(None) is None


@pytest.mark.parametrize("name", ["raw", "technical-unknown", None])
def test_missing_content_formats_to_empty_string(name):
    empty = Completion(content=None, provider="p", model="m")

    assert OutputFormatterRegistry().format(empty, name) == ""
