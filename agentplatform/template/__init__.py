"""Prompt templating."""

from .engine import PromptTemplate, PromptTemplateEngine, TemplateBuilder, is_truthy

__all__ = ["PromptTemplate", "PromptTemplateEngine", "TemplateBuilder", "is_truthy"]
