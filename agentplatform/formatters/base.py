"""Output format strategy interface and built-in format kinds."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Protocol

from agentplatform.models import Completion


class OutputFormatStrategy(Protocol):
    """Pure function from a completion to audience-formatted text."""

    def __call__(self, completion: Completion) -> str:
        ...


class FormatKind(str, Enum):
    """Built-in output formats. Values are the names used in configuration."""

    TECHNICAL = "technical"
    BUSINESS = "business"
    EXECUTIVE = "executive"
    RAW = "raw"

    @classmethod
    def from_name(cls, name: Optional[str]) -> Optional["FormatKind"]:
        """Map a configuration string to a kind (case-insensitive); None if not built-in."""
        if not name:
            return None
        try:
            return cls(normalize_format_name(name))
        except ValueError:
            return None


def normalize_format_name(name: str) -> str:
    return name.strip().lower()
