"""Completion capability: interface and LangChain-backed implementation."""

from .interfaces import CompletionProvider
from .langchain_provider import LangChainCompletionProvider
from .model_resolver import build_completion_provider

__all__ = ["CompletionProvider", "LangChainCompletionProvider", "build_completion_provider"]
