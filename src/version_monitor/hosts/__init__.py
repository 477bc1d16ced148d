"""
Host services for Version Monitor.

One service per supported host, collected in a registry the polling
scheduler dispatches through.
"""

from .base import HostService
from .github import GitHubHostService
from .npm import NpmHostService
from .registry import HostRegistry, build_registry, create_host_service

__all__ = [
    "HostService",
    "GitHubHostService",
    "NpmHostService",
    "HostRegistry",
    "build_registry",
    "create_host_service",
]
