"""Project root path detection - works regardless of working directory."""

from __future__ import annotations

from pathlib import Path
from functools import lru_cache


@lru_cache(maxsize=1)
def get_project_root() -> Path:
    """Get absolute path to project root directory.

    This works by finding the directory containing the 'agentplatform' package,
    regardless of the current working directory.

    Returns:
        Path: Absolute path to project root
    """
    # Go up: project_root.py -> config/ -> agentplatform/ -> project_root/
    return Path(__file__).resolve().parent.parent.parent


def resolve_project_path(relative_path: str | Path) -> Path:
    """Resolve a path relative to project root.

    Absolute paths are returned unchanged, so values coming from settings may be
    either form.

    Args:
        relative_path: Path relative to project root (e.g., "domains", "logs")

    Returns:
        Path: Absolute path

    Example:
        >>> domains_dir = resolve_project_path("domains")
    """
    path = Path(relative_path)
    if path.is_absolute():
        return path
    return get_project_root() / path


__all__ = ["get_project_root", "resolve_project_path"]
