"""Typed accessors for the usage metadata attached to task results."""

from __future__ import annotations

from typing import Iterable

from agentplatform.models import TaskResult


def _int_metadata(result: TaskResult, key: str) -> int:
    value = result.metadata.get(key)
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


def get_input_tokens(result: TaskResult) -> int:
    return _int_metadata(result, "input_tokens")


def get_output_tokens(result: TaskResult) -> int:
    return _int_metadata(result, "output_tokens")


def get_total_tokens(result: TaskResult) -> int:
    return _int_metadata(result, "total_tokens")


def get_estimated_cost(result: TaskResult) -> float:
    value = result.metadata.get("estimated_cost")
    return float(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else 0.0


def has_usage_info(result: TaskResult) -> bool:
    return "total_tokens" in result.metadata


def summarize_usage(results: Iterable[TaskResult]) -> dict:
    """Aggregate token counts and cost over several results."""
    summary = {"input_tokens": 0, "output_tokens": 0, "total_tokens": 0, "estimated_cost": 0.0}
    for result in results:
        summary["input_tokens"] += get_input_tokens(result)
        summary["output_tokens"] += get_output_tokens(result)
        summary["total_tokens"] += get_total_tokens(result)
        summary["estimated_cost"] += get_estimated_cost(result)
    return summary
