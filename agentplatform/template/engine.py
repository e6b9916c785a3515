"""Prompt template engine with variable substitution and conditional logic.

Supports a small Mustache-like syntax:

    {{name}}                       variable substitution
    {{#if name}}...{{/if}}         body kept when `name` is truthy
    {{#each items}}...{{/each}}    body repeated per element of `items`

Blocks are processed in that order: conditionals, loops, then variables. No
escaping is performed; templates come from operator configuration.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Dict, List, Optional

LOGGER = logging.getLogger(__name__)

VARIABLE_PATTERN = re.compile(r"\{\{([^}]+)}}")
CONDITIONAL_PATTERN = re.compile(r"\{\{#if ([^}]+)}}(.*?)\{\{/if}}", re.DOTALL)
LOOP_PATTERN = re.compile(r"\{\{#each ([^}]+)}}(.*?)\{\{/each}}", re.DOTALL)


@dataclass(frozen=True)
class PromptTemplate:
    """Registered template: content plus default variable values."""

    name: str
    content: str
    defaults: Dict[str, Any] = field(default_factory=dict)


def is_truthy(value: Any) -> bool:
    """Condition semantics for `{{#if}}` blocks.

    None, empty strings and empty collections are false; booleans are
    themselves; anything else that is present is true (including 0).
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (str, Sequence, Mapping, set, frozenset)):
        return len(value) > 0
    return True


class PromptTemplateEngine:
    """Render prompt templates by name or from inline content."""

    def __init__(self) -> None:
        self._templates: Dict[str, PromptTemplate] = {}
        self._lock = RLock()

    def register_template(self, name: str, content: str, defaults: Optional[Mapping[str, Any]] = None) -> None:
        LOGGER.debug(f"Registering template: {name}")
        with self._lock:
            self._templates[name] = PromptTemplate(name, content, dict(defaults or {}))

    def load_templates(self, contents: Mapping[str, str]) -> None:
        """Register several templates at once (name -> content)."""
        for name, content in contents.items():
            self.register_template(name, content)
        LOGGER.info(f"Loaded {len(contents)} templates")

    def template_names(self) -> List[str]:
        with self._lock:
            return sorted(self._templates)

    def get_template(self, name: str) -> Optional[PromptTemplate]:
        with self._lock:
            return self._templates.get(name)

    def render(self, template_or_name: str, variables: Optional[Mapping[str, Any]] = None) -> str:
        """Render a registered template, or treat the argument as template content.

        Args:
            template_or_name: Registered template name, or template content
            variables: Variable values; merged over the template's defaults

        Returns:
            Rendered text, stripped of leading/trailing whitespace
        """
        variables = dict(variables or {})
        template = self.get_template(template_or_name)
        if template is not None:
            return self._render_content(template.content, {**template.defaults, **variables})
        return self._render_content(template_or_name, variables)

    def template(self, name: str) -> "TemplateBuilder":
        return TemplateBuilder(self, name)

    def _render_content(self, content: str, variables: Dict[str, Any]) -> str:
        result = self._process_conditionals(content, variables)
        result = self._process_loops(result, variables)
        result = self._process_variables(result, variables)
        return result.strip()

    def _process_conditionals(self, content: str, variables: Mapping[str, Any]) -> str:
        def replace(match: re.Match) -> str:
            condition = match.group(1).strip()
            return match.group(2) if is_truthy(variables.get(condition)) else ""

        return CONDITIONAL_PATTERN.sub(replace, content)

    def _process_loops(self, content: str, variables: Mapping[str, Any]) -> str:
        def replace(match: re.Match) -> str:
            list_name = match.group(1).strip()
            body = match.group(2)
            items = variables.get(list_name)
            if isinstance(items, (str, bytes)) or not isinstance(items, (Sequence, set, frozenset)):
                LOGGER.warning(f"Variable is not a list: {list_name}")
                return ""

            rendered = []
            for item in items:
                scope = dict(variables)
                if isinstance(item, Mapping):
                    scope.update({str(k): v for k, v in item.items()})
                else:
                    scope["item"] = item
                rendered.append(self._process_variables(body, scope))
            return "".join(rendered)

        return LOOP_PATTERN.sub(replace, content)

    def _process_variables(self, content: str, variables: Mapping[str, Any]) -> str:
        def replace(match: re.Match) -> str:
            name = match.group(1).strip()
            value = variables.get(name)
            if value is None:
                LOGGER.warning(f"Variable not found: {name}")
                return ""
            return str(value)

        return VARIABLE_PATTERN.sub(replace, content)


class TemplateBuilder:
    """Fluent helper: engine.template("review").with_("task", t).build()."""

    def __init__(self, engine: PromptTemplateEngine, template_name: str) -> None:
        self._engine = engine
        self._template_name = template_name
        self._variables: Dict[str, Any] = {}

    def with_(self, key: str, value: Any) -> "TemplateBuilder":
        self._variables[key] = value
        return self

    def with_all(self, variables: Mapping[str, Any]) -> "TemplateBuilder":
        self._variables.update(variables)
        return self

    def build(self) -> str:
        return self._engine.render(self._template_name, self._variables)
