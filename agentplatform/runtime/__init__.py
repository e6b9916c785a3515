"""Runtime assembly."""

from .app import AgentPlatform, build_application

__all__ = ["AgentPlatform", "build_application"]
