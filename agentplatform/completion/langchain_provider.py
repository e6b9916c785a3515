"""Completion provider backed by a LangChain chat model."""

from __future__ import annotations

import logging
from typing import Any, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, HumanMessage

from agentplatform.models import Completion

LOGGER = logging.getLogger(__name__)


def _message_text(message: AIMessage) -> str:
    content: Any = message.content
    if isinstance(content, str):
        return content
    # Content blocks: keep the text parts only
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class LangChainCompletionProvider:
    """Adapts any `langchain_core` chat model to the CompletionProvider interface.

    Temperature and token budget are bound per call, so one chat model instance
    serves agents with different generation parameters. Token counts come from
    the message's `usage_metadata`; cost is estimated from per-1K prices.
    """

    def __init__(
        self,
        chat_model: BaseChatModel,
        provider_name: str,
        model: Optional[str] = None,
        input_cost_per_1k: float = 0.0,
        output_cost_per_1k: float = 0.0,
    ) -> None:
        self._chat_model = chat_model
        self.provider_name = provider_name
        self.model = model or getattr(chat_model, "model_name", None) or getattr(chat_model, "model", None) or "unknown"
        self._input_cost_per_1k = input_cost_per_1k
        self._output_cost_per_1k = output_cost_per_1k

    def generate(self, prompt: str, temperature: float, max_tokens: int) -> Completion:
        LOGGER.debug(f"Generating with {self.provider_name}/{self.model} (temperature={temperature}, max_tokens={max_tokens})")
        runnable = self._chat_model.bind(temperature=temperature, max_tokens=max_tokens)
        message = runnable.invoke([HumanMessage(content=prompt)])

        usage = getattr(message, "usage_metadata", None) or {}
        input_tokens = int(usage.get("input_tokens", 0))
        output_tokens = int(usage.get("output_tokens", 0))
        total_tokens = int(usage.get("total_tokens", input_tokens + output_tokens))

        return Completion(
            content=_message_text(message),
            provider=self.provider_name,
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=total_tokens,
            estimated_cost=self.estimate_cost(input_tokens, output_tokens),
        )

    def estimate_cost(self, input_tokens: int, output_tokens: int) -> float:
        return (input_tokens / 1000) * self._input_cost_per_1k + (output_tokens / 1000) * self._output_cost_per_1k

    def is_healthy(self) -> bool:
        """Probe the backend with a one-token request."""
        try:
            self._chat_model.bind(max_tokens=1).invoke([HumanMessage(content="ping")])
            return True
        except Exception as e:
            LOGGER.warning(f"Health check failed for {self.provider_name}/{self.model}: {e}")
            return False
