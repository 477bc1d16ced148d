"""
Version Monitor

Polls source-code hosts and package registries for new releases of tracked
projects and announces each release exactly once.
"""

__version__ = "0.1.0"

from .config import Settings
from .exceptions import VersionMonitorError
from .hosts import HostRegistry, HostService
from .models import HostType, Project, Release
from .polling import PollingScheduler

__all__ = [
    "Settings",
    "HostRegistry",
    "HostService",
    "HostType",
    "Project",
    "Release",
    "PollingScheduler",
    "VersionMonitorError",
]
