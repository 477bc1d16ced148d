"""
Base remote host client.

This module defines the interface every host adapter implements, plus the raw
data shapes the adapters return before host services turn them into domain
objects.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from ..models import RateLimitSnapshot


class RawRelease:
    """A version or tag as reported by a host."""

    def __init__(
        self, version: str, url: str = "", published_at: datetime | None = None
    ):
        self.version = version
        self.url = url
        self.published_at = published_at


class RawProjectData:
    """Project metadata and release listing as reported by a host."""

    def __init__(
        self,
        name: str,
        description: str | None = None,
        releases: list[RawRelease] | None = None,
    ):
        self.name = name
        self.description = description or ""
        self.releases = releases or []


class RemoteHostClient(ABC):
    """
    Abstract base class for remote host clients.

    Clients speak to exactly one remote API. They return None when the
    requested project does not exist and raise HostAPIError for every other
    failure, including timeouts and malformed responses.
    """

    host: str = ""

    @abstractmethod
    async def fetch_project(self, identifier: str) -> RawProjectData | None:
        """
        Fetch project metadata and the full release listing.

        Args:
            identifier: Host specific project identifier

        Returns:
            Raw project data or None if the project does not exist

        Raises:
            HostAPIError: On network failures, timeouts or malformed responses
        """
        pass

    async def fetch_rate_limit(self) -> RateLimitSnapshot | None:
        """
        Fetch the current call budget.

        Only hosts with budgeted APIs override this.

        Returns:
            Rate limit snapshot or None if unavailable
        """
        return None

    async def close(self) -> None:
        """Release any held connections."""
        return None
