"""Interfaces for the completion capability agents depend on."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from agentplatform.models import Completion


@runtime_checkable
class CompletionProvider(Protocol):
    """Text generation backend used by configurable agents.

    `generate` may raise any provider-specific error; agents turn it into a
    failed task result. Returning None is treated the same way.
    """

    provider_name: str
    model: str

    def generate(self, prompt: str, temperature: float, max_tokens: int) -> Optional[Completion]:
        ...

    def is_healthy(self) -> bool:
        ...
