"""
GitHub API client for Version Monitor.

This module wraps PyGithub to read repository metadata, tags and the core
rate limit. PyGithub is synchronous, so every call runs in a worker thread
and is bounded by the configured timeout.
"""

import asyncio
from typing import Any, Optional

import structlog
from github import Auth, Github, GithubException, UnknownObjectException

from ..config import GitHubConfig
from ..exceptions import ConfigurationError, HostAPIError
from ..models import RateLimitSnapshot
from .base import RawProjectData, RawRelease, RemoteHostClient

logger = structlog.get_logger(__name__)


class GitHubClient(RemoteHostClient):
    """
    GitHub API client with token authentication and rate limit probing.

    Tags are reported as releases, in the order GitHub lists them.
    """

    host = "github"

    def __init__(self, config: GitHubConfig) -> None:
        """
        Initialize the GitHub client.

        Args:
            config: GitHub configuration

        Raises:
            ConfigurationError: If no OAuth token is configured
        """
        if not config.oauth_token:
            raise ConfigurationError("Missing GitHub OAuth token")

        self.config = config
        self._github: Optional[Github] = None

    def _get_github_instance(self) -> Github:
        """Get authenticated GitHub instance."""
        if self._github is None:
            self._github = Github(
                auth=Auth.Token(self.config.oauth_token),
                base_url=self.config.api_url,
                timeout=self.config.timeout_seconds,
            )
            logger.info("GitHub client ready", api_url=self.config.api_url)
        return self._github

    async def _run(self, func: Any, *args: Any) -> Any:
        return await asyncio.wait_for(
            asyncio.to_thread(func, *args), timeout=self.config.timeout_seconds
        )

    async def fetch_project(self, identifier: str) -> RawProjectData | None:
        """
        Fetch a repository and its tags.

        Args:
            identifier: Repository full name (owner/repo)

        Returns:
            Raw project data or None if the repository does not exist
        """
        logger.debug("Fetching GitHub repository", repository=identifier)

        try:
            return await self._run(self._fetch_repository, identifier)
        except UnknownObjectException:
            logger.info("GitHub repository does not exist", repository=identifier)
            return None
        except TimeoutError as e:
            raise HostAPIError(
                f"Timed out fetching repository {identifier}", host=self.host
            ) from e
        except GithubException as e:
            logger.error(
                "Failed to get repository", repository=identifier, error=str(e)
            )
            raise HostAPIError(
                f"Failed to get repository {identifier}: {e}",
                host=self.host,
                status_code=e.status,
            ) from e
        except Exception as e:
            # requests raises its own errors for connection failures
            logger.error(
                "Failed to reach GitHub", repository=identifier, error=str(e)
            )
            raise HostAPIError(
                f"Failed to reach GitHub for {identifier}: {e}", host=self.host
            ) from e

    def _fetch_repository(self, identifier: str) -> RawProjectData:
        repo = self._get_github_instance().get_repo(identifier)
        releases = [
            RawRelease(
                version=tag.name,
                url=f"https://github.com/{identifier}/releases/tag/{tag.name}",
            )
            for tag in repo.get_tags()
        ]

        return RawProjectData(
            name=repo.name,
            description=repo.description,
            releases=releases,
        )

    async def fetch_rate_limit(self) -> RateLimitSnapshot | None:
        """
        Get the core API rate limit.

        Returns:
            Rate limit snapshot or None if it could not be read
        """
        try:
            return await self._run(self._fetch_rate_limit)
        except Exception as e:
            logger.warning("Failed to get rate limit info", error=str(e))
            return None

    def _fetch_rate_limit(self) -> RateLimitSnapshot:
        rate_limit = self._get_github_instance().get_rate_limit()
        # Newer PyGithub releases nest the per-resource limits under `resources`
        resources = getattr(rate_limit, "resources", None) or rate_limit
        core = resources.core

        return RateLimitSnapshot(
            remaining=core.remaining,
            limit=core.limit,
            reset_time=core.reset,
        )

    async def close(self) -> None:
        if self._github is not None:
            await asyncio.to_thread(self._github.close)
            self._github = None
