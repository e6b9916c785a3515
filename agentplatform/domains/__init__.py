"""Domain plugins: manifests, loader and manager."""

from .schema import DomainConfig, DomainHealth, DomainMetadata
from .loader import DEFAULT_MANIFEST_FILE, DomainLoader, DomainLoadReport
from .manager import DomainManager

__all__ = [
    "DomainConfig",
    "DomainHealth",
    "DomainMetadata",
    "DEFAULT_MANIFEST_FILE",
    "DomainLoader",
    "DomainLoadReport",
    "DomainManager",
]
