"""Registry of named output format strategies.

Names are case-insensitive. Formatting never fails: a blank or unknown name, or
a strategy that raises, falls back to the raw completion content.
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import Dict, List, Optional

from agentplatform.models import Completion

from .base import OutputFormatStrategy, normalize_format_name
from .builtin import BUILTIN_FORMATTERS

LOGGER = logging.getLogger(__name__)


class OutputFormatterRegistry:
    """Thread-safe name -> strategy mapping."""

    def __init__(self, register_builtins: bool = True) -> None:
        self._formatters: Dict[str, OutputFormatStrategy] = {}
        self._lock = RLock()
        if register_builtins:
            self.register_builtin_formats()

    def register(self, name: str, strategy: OutputFormatStrategy) -> None:
        """Register (or silently replace) a strategy.

        Raises:
            ValueError: blank name or missing strategy
        """
        if not name or not name.strip():
            raise ValueError("Format name cannot be blank")
        if strategy is None or not callable(strategy):
            raise ValueError("Formatter must be callable")

        normalized = normalize_format_name(name)
        with self._lock:
            self._formatters[normalized] = strategy
        LOGGER.debug(f"Registered output format: {normalized}")

    def register_builtin_formats(self) -> None:
        for kind, strategy in BUILTIN_FORMATTERS.items():
            self.register(kind.value, strategy)
        LOGGER.info(f"Built-in formatters registered: {', '.join(self.list_names())}")

    def unregister(self, name: str) -> bool:
        if not name or not name.strip():
            return False
        normalized = normalize_format_name(name)
        with self._lock:
            removed = self._formatters.pop(normalized, None) is not None
        if removed:
            LOGGER.info(f"Unregistered output format: {normalized}")
        return removed

    def has(self, name: Optional[str]) -> bool:
        if not name or not name.strip():
            return False
        with self._lock:
            return normalize_format_name(name) in self._formatters

    def get(self, name: Optional[str]) -> Optional[OutputFormatStrategy]:
        if not name or not name.strip():
            return None
        with self._lock:
            return self._formatters.get(normalize_format_name(name))

    def list_names(self) -> List[str]:
        with self._lock:
            return sorted(self._formatters)

    def count(self) -> int:
        with self._lock:
            return len(self._formatters)

    def format(self, completion: Optional[Completion], format_name: Optional[str]) -> str:
        """Format a completion with the named strategy, falling back to raw content."""
        if completion is None:
            LOGGER.warning("Received no completion to format")
            return ""

        # Fallback text for blank/unknown names and failing strategies; providers may return None content
        raw = completion.content or ""
        if not format_name or not format_name.strip():
            LOGGER.warning("No format type specified, using raw format")
            return raw

        strategy = self.get(format_name)
        if strategy is None:
            LOGGER.warning(
                f"Unknown format type: {format_name}. Using raw format. Available formats: {self.list_names()}"
            )
            return raw

        try:
            return strategy(completion)
        except Exception as e:
            LOGGER.error(f"Error formatting response with {format_name}: {e}", exc_info=True)
            return raw
