"""Configuration package."""

from .settings import (
    DomainSettings,
    ExecutorSettings,
    ModelSettings,
    ObservabilitySettings,
    Settings,
    get_settings,
)
from .project_root import get_project_root, resolve_project_path

__all__ = [
    "DomainSettings",
    "ExecutorSettings",
    "ModelSettings",
    "ObservabilitySettings",
    "Settings",
    "get_settings",
    "get_project_root",
    "resolve_project_path",
]
