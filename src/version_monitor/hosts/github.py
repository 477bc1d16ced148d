"""
GitHub host service.

Tracks repositories identified as ``owner/repo`` and reports new tags. The
GitHub API is budgeted, so every check is gated by the rate limiter.
"""

import re

from ..clients.github import GitHubClient
from ..models import HostType
from ..polling.rate_limiter import RateLimiter
from ..storage.manager import ProjectStore
from .base import HostService

REPOSITORY_PATTERN = re.compile(r"^[a-z0-9_-]+/[a-z0-9_-]+$", re.IGNORECASE)


class GitHubHostService(HostService):
    """Host service for GitHub repositories."""

    host_identifier = "github"
    host_type = HostType.GITHUB

    def __init__(
        self,
        client: GitHubClient,
        store: ProjectStore,
        rate_limiter: RateLimiter | None = None,
    ):
        super().__init__(client, store, rate_limiter)

    def valid_identifier(self, identifier: str) -> bool:
        """Accept ``owner/repo``, e.g. ``apple/swift``."""
        if not identifier:
            return False
        return REPOSITORY_PATTERN.fullmatch(identifier) is not None
