"""
Pytest configuration and fixtures for Version Monitor tests.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from version_monitor.clients.base import RawProjectData, RawRelease, RemoteHostClient
from version_monitor.config import Settings
from version_monitor.models import HostType, Project, RateLimitSnapshot, Release
from version_monitor.storage.manager import InMemoryProjectStore


class FakeHostClient(RemoteHostClient):
    """Scriptable client returning whatever the test put in ``projects``."""

    host = "fake"

    def __init__(self) -> None:
        self.projects: dict[str, RawProjectData | None] = {}
        self.errors: dict[str, Exception] = {}
        self.rate_limit: RateLimitSnapshot | None = None
        self.fetch_calls: list[str] = []

    def set_versions(self, identifier: str, versions: list[str]) -> None:
        self.projects[identifier] = RawProjectData(
            name=identifier.split("/")[-1],
            description=f"{identifier} description",
            releases=[
                RawRelease(version=v, url=f"https://example.com/{identifier}/{v}")
                for v in versions
            ],
        )

    async def fetch_project(self, identifier: str) -> RawProjectData | None:
        self.fetch_calls.append(identifier)
        if identifier in self.errors:
            raise self.errors[identifier]
        return self.projects.get(identifier)

    async def fetch_rate_limit(self) -> RateLimitSnapshot | None:
        return self.rate_limit


@pytest.fixture
def mock_settings() -> Settings:
    """Settings for testing."""
    return Settings(
        enabled_hosts="github,npm",
        github_oauth_token="test-token",
        github_rate_limit_buffer=10,
        polling_interval_seconds=60,
        polling_concurrent_projects=3,
        log_level="DEBUG",
        log_format="console",
    )


@pytest.fixture
def store() -> InMemoryProjectStore:
    return InMemoryProjectStore()


@pytest.fixture
def fake_client() -> FakeHostClient:
    return FakeHostClient()


@pytest.fixture
def mock_notifier() -> AsyncMock:
    notifier = AsyncMock()
    notifier.notify.return_value = None
    return notifier


@pytest.fixture
def reset_time() -> datetime:
    return datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def make_project(
    identifier: str = "apple/swift",
    host_type: HostType = HostType.GITHUB,
    versions: list[str] | None = None,
) -> Project:
    """Build a project holding the given versions."""
    return Project(
        identifier=identifier,
        host_type=host_type,
        name=identifier,
        releases=[Release(version=v) for v in versions or []],
    )
