"""Built-in output formatters for technical, business and executive audiences."""

from __future__ import annotations

from typing import Dict

from agentplatform.models import Completion

from .base import FormatKind, OutputFormatStrategy


def format_technical(completion: Completion) -> str:
    """Content plus a provider/model/token footer for developer audiences."""
    return (
        f"{completion.content}\n\n---\n"
        "**Technical Details**\n"
        f"- Provider: {completion.provider}\n"
        f"- Model: {completion.model}\n"
        f"- Tokens: {completion.total_tokens}\n"
    )


def format_business(completion: Completion) -> str:
    """Summary heading first, resource cost last, for management audiences."""
    return (
        f"## Business Summary\n\n{completion.content}\n\n---\n"
        "**Resource Usage**\n"
        f"- Estimated Cost: ${completion.estimated_cost:.4f}\n"
    )


def format_executive(completion: Completion) -> str:
    # Bottom line only: no technical or cost details
    return f"## Executive Summary\n\n{completion.content}"


def format_raw(completion: Completion) -> str:
    return completion.content or ""


BUILTIN_FORMATTERS: Dict[FormatKind, OutputFormatStrategy] = {
    FormatKind.TECHNICAL: format_technical,
    FormatKind.BUSINESS: format_business,
    FormatKind.EXECUTIVE: format_executive,
    FormatKind.RAW: format_raw,
}
