"""
Tests for the remote host clients.
"""

import json
import time
from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

import httpx
import pytest
from github import GithubException, UnknownObjectException

from version_monitor.clients.github import GitHubClient
from version_monitor.clients.npm import NpmClient
from version_monitor.config import GitHubConfig, NpmConfig
from version_monitor.exceptions import ConfigurationError, HostAPIError

LEFT_PAD = {
    "name": "left-pad",
    "description": "String left pad",
    "versions": {"1.0.0": {}, "1.1.0": {}, "1.3.0": {}},
    "time": {
        "created": "2014-03-14T00:00:00.000Z",
        "1.0.0": "2014-03-14T00:00:00.000Z",
        "1.1.0": "2016-03-23T00:00:00.000Z",
    },
}


def npm_client(handler) -> NpmClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return NpmClient(NpmConfig(registry_url="https://registry.test"), http)


class TestNpmClient:
    """Test the npm registry client."""

    @pytest.mark.asyncio
    async def test_fetch_project(self):
        """Test a package document becomes project data."""
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, json=LEFT_PAD)

        raw = await npm_client(handler).fetch_project("left-pad")

        assert requested == ["https://registry.test/left-pad"]
        assert raw.name == "left-pad"
        assert raw.description == "String left pad"
        assert [r.version for r in raw.releases] == ["1.0.0", "1.1.0", "1.3.0"]
        assert raw.releases[0].url == "https://www.npmjs.com/package/left-pad/v/1.0.0"
        assert raw.releases[1].published_at == datetime(2016, 3, 23, tzinfo=UTC)
        assert raw.releases[2].published_at is None

    @pytest.mark.asyncio
    async def test_scoped_package_url(self):
        """Test scoped package names are escaped in the URL."""
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(request.url.raw_path.decode())
            return httpx.Response(200, json={"name": "@angular/core", "versions": {}})

        raw = await npm_client(handler).fetch_project("@angular/core")

        assert requested == ["/@angular%2Fcore"]
        assert raw.releases == []

    @pytest.mark.asyncio
    async def test_not_found(self):
        """Test a 404 returns None."""
        client = npm_client(lambda request: httpx.Response(404, json={}))

        assert await client.fetch_project("missing") is None

    @pytest.mark.asyncio
    async def test_server_error(self):
        """Test server errors raise with the status code."""
        client = npm_client(lambda request: httpx.Response(503))

        with pytest.raises(HostAPIError) as exc_info:
            await client.fetch_project("left-pad")

        assert exc_info.value.status_code == 503
        assert exc_info.value.host == "npm"

    @pytest.mark.asyncio
    async def test_malformed_json(self):
        """Test a non-JSON body raises a host API error."""
        client = npm_client(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(HostAPIError):
            await client.fetch_project("left-pad")

    @pytest.mark.asyncio
    async def test_non_object_document(self):
        """Test a non-object document raises a host API error."""
        client = npm_client(
            lambda request: httpx.Response(200, content=json.dumps([1, 2]).encode())
        )

        with pytest.raises(HostAPIError):
            await client.fetch_project("left-pad")

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Test npm timeouts raise a host API error."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(HostAPIError, match="Timed out"):
            await npm_client(handler).fetch_project("left-pad")

    @pytest.mark.asyncio
    async def test_no_rate_limit(self):
        """Test npm reports no rate limit."""
        client = npm_client(lambda request: httpx.Response(200, json=LEFT_PAD))

        assert await client.fetch_rate_limit() is None


class TestGitHubClient:
    """Test the PyGithub backed client."""

    def setup_method(self):
        self.config = GitHubConfig(oauth_token="test-token", timeout_seconds=1)

    def test_requires_token(self):
        """Test the client requires an OAuth token."""
        with pytest.raises(ConfigurationError):
            GitHubClient(GitHubConfig(oauth_token=""))

    def make_client(self, github: MagicMock) -> GitHubClient:
        client = GitHubClient(self.config)
        client._github = github
        return client

    @pytest.mark.asyncio
    async def test_fetch_project_lists_tags(self):
        """Test repository tags become releases."""
        tag_a, tag_b = MagicMock(), MagicMock()
        tag_a.name = "v2.0"
        tag_b.name = "v1.0"
        repo = MagicMock()
        repo.name = "swift"
        repo.description = "The Swift Programming Language"
        repo.get_tags.return_value = [tag_a, tag_b]
        github = MagicMock()
        github.get_repo.return_value = repo

        raw = await self.make_client(github).fetch_project("apple/swift")

        github.get_repo.assert_called_once_with("apple/swift")
        assert raw.name == "swift"
        assert [r.version for r in raw.releases] == ["v2.0", "v1.0"]
        assert raw.releases[0].url == "https://github.com/apple/swift/releases/tag/v2.0"

    @pytest.mark.asyncio
    async def test_unknown_repository(self):
        """Test an unknown repository returns None."""
        github = MagicMock()
        github.get_repo.side_effect = UnknownObjectException(404, {}, {})

        assert await self.make_client(github).fetch_project("apple/nope") is None

    @pytest.mark.asyncio
    async def test_api_error(self):
        """Test GitHub API errors keep their status code."""
        github = MagicMock()
        github.get_repo.side_effect = GithubException(500, {"message": "boom"}, {})

        with pytest.raises(HostAPIError) as exc_info:
            await self.make_client(github).fetch_project("apple/swift")

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_connection_error(self):
        """Test network errors become host API errors."""
        github = MagicMock()
        github.get_repo.side_effect = ConnectionError("reset")

        with pytest.raises(HostAPIError):
            await self.make_client(github).fetch_project("apple/swift")

    @pytest.mark.asyncio
    async def test_fetch_timeout(self):
        """Test slow GitHub calls time out."""
        github = MagicMock()
        github.get_repo.side_effect = lambda identifier: time.sleep(0.2)
        client = GitHubClient(GitHubConfig(oauth_token="t", timeout_seconds=0.01))
        client._github = github

        with pytest.raises(HostAPIError, match="Timed out"):
            await client.fetch_project("apple/swift")

    @pytest.mark.asyncio
    async def test_rate_limit(self):
        """Test the core rate limit is read."""
        reset = datetime(2026, 1, 1, tzinfo=UTC)
        overview = MagicMock()
        overview.resources.core.remaining = 4000
        overview.resources.core.limit = 5000
        overview.resources.core.reset = reset
        github = MagicMock()
        github.get_rate_limit.return_value = overview

        snapshot = await self.make_client(github).fetch_rate_limit()

        assert snapshot.remaining == 4000
        assert snapshot.limit == 5000
        assert snapshot.reset_time == reset

    @pytest.mark.asyncio
    async def test_rate_limit_failure_returns_none(self):
        """Test rate limit lookup failures return None."""
        github = MagicMock()
        github.get_rate_limit.side_effect = GithubException(401, {}, {})

        assert await self.make_client(github).fetch_rate_limit() is None

    @pytest.mark.asyncio
    async def test_lazy_authentication(self):
        """Test the PyGithub instance is built once, on first use."""
        with patch("version_monitor.clients.github.Github") as github_cls:
            client = GitHubClient(self.config)
            github_cls.assert_not_called()

            client._get_github_instance()
            client._get_github_instance()

            github_cls.assert_called_once()
            assert github_cls.call_args.kwargs["base_url"] == "https://api.github.com"

    def test_sub_second_timeout_is_kept(self):
        """Test fractional timeouts reach PyGithub unchanged."""
        config = GitHubConfig(oauth_token="test-token", timeout_seconds=0.5)
        with patch("version_monitor.clients.github.Github") as github_cls:
            GitHubClient(config)._get_github_instance()

        assert github_cls.call_args.kwargs["timeout"] == 0.5
