"""
Storage for Version Monitor.

This package provides the abstract project store used by the polling engine
and its in-memory backend.
"""

from .manager import InMemoryProjectStore, ProjectStore, StoreFactory

__all__ = [
    "ProjectStore",
    "StoreFactory",
    "InMemoryProjectStore",
]
