"""Shared utilities: errors, logging helpers, result accessors."""
