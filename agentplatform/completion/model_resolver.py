"""Default completion provider wiring using environment-derived settings.

Converts `ModelSettings` into a `ChatOpenAI` client (any OpenAI-compatible
endpoint via base_url) wrapped in a LangChainCompletionProvider.
"""

from __future__ import annotations

from typing import Dict

from langchain_openai import ChatOpenAI

from agentplatform.config import ModelSettings

from .langchain_provider import LangChainCompletionProvider


def _chat_kwargs(settings: ModelSettings) -> Dict[str, object]:
    if not settings.api_key:
        raise RuntimeError(f"Missing API key for model {settings.model}; set MODEL_API_KEY in .env.")
    kwargs: Dict[str, object] = {
        "model": settings.model,
        "api_key": settings.api_key,
        "timeout": settings.request_timeout,
    }
    if settings.base_url:
        kwargs["base_url"] = settings.base_url
    return kwargs


def build_completion_provider(settings: ModelSettings) -> LangChainCompletionProvider:
    """Construct the completion provider described by settings.

    Raises:
        RuntimeError: no API key configured
    """
    chat_model = ChatOpenAI(**_chat_kwargs(settings))
    return LangChainCompletionProvider(
        chat_model,
        provider_name=settings.provider,
        model=settings.model,
        input_cost_per_1k=settings.input_cost_per_1k,
        output_cost_per_1k=settings.output_cost_per_1k,
    )
