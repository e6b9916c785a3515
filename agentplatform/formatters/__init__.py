"""Pluggable output formatting."""

from .base import FormatKind, OutputFormatStrategy, normalize_format_name
from .builtin import (
    BUILTIN_FORMATTERS,
    format_business,
    format_executive,
    format_raw,
    format_technical,
)
from .registry import OutputFormatterRegistry

__all__ = [
    "FormatKind",
    "OutputFormatStrategy",
    "normalize_format_name",
    "BUILTIN_FORMATTERS",
    "format_business",
    "format_executive",
    "format_raw",
    "format_technical",
    "OutputFormatterRegistry",
]
