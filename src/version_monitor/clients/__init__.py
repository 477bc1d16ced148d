"""
Remote host clients for Version Monitor.

One client per supported host. Clients only speak the remote protocol; the
host services in ``version_monitor.hosts`` own validation and reconciliation.
"""

from .base import RawProjectData, RawRelease, RemoteHostClient
from .github import GitHubClient
from .npm import NpmClient

__all__ = [
    "RemoteHostClient",
    "RawProjectData",
    "RawRelease",
    "GitHubClient",
    "NpmClient",
]
