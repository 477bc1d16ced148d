"""
npm registry client for Version Monitor.

Reads package documents from the public registry. The registry has no call
budget, so this client does not probe rate limits.
"""

from datetime import datetime
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from ..config import NpmConfig
from ..exceptions import HostAPIError
from .base import RawProjectData, RawRelease, RemoteHostClient

logger = structlog.get_logger(__name__)

PACKAGE_URL = "https://www.npmjs.com/package/{name}/v/{version}"


class NpmClient(RemoteHostClient):
    """Async client for the npm registry."""

    host = "npm"

    def __init__(
        self, config: NpmConfig, http_client: httpx.AsyncClient | None = None
    ) -> None:
        """
        Initialize the npm client.

        Args:
            config: npm configuration
            http_client: Optional preconfigured HTTP client
        """
        self.config = config
        self._http = http_client or httpx.AsyncClient(
            timeout=config.timeout_seconds,
            headers={"Accept": "application/json"},
        )

    def _package_url(self, identifier: str) -> str:
        # Scoped packages keep the leading @ but escape the slash
        return f"{self.config.registry_url.rstrip('/')}/{quote(identifier, safe='@')}"

    async def fetch_project(self, identifier: str) -> RawProjectData | None:
        """
        Fetch a package document.

        Args:
            identifier: Package name, optionally scoped (@scope/name)

        Returns:
            Raw project data or None if the package does not exist
        """
        logger.debug("Fetching npm package", package=identifier)

        try:
            response = await self._http.get(
                self._package_url(identifier), timeout=self.config.timeout_seconds
            )
        except httpx.TimeoutException as e:
            raise HostAPIError(
                f"Timed out fetching npm package {identifier}", host=self.host
            ) from e
        except httpx.HTTPError as e:
            raise HostAPIError(
                f"Failed to fetch npm package {identifier}: {e}", host=self.host
            ) from e

        if response.status_code == 404:
            logger.info("npm package does not exist", package=identifier)
            return None

        if response.status_code != 200:
            raise HostAPIError(
                f"Unexpected response for npm package {identifier}",
                host=self.host,
                status_code=response.status_code,
            )

        try:
            document = response.json()
        except ValueError as e:
            raise HostAPIError(
                f"Malformed response for npm package {identifier}", host=self.host
            ) from e

        if not isinstance(document, dict):
            raise HostAPIError(
                f"Malformed response for npm package {identifier}", host=self.host
            )

        return self._parse_document(document, identifier)

    def _parse_document(
        self, document: dict[str, Any], identifier: str
    ) -> RawProjectData:
        versions = document.get("versions") or {}
        times = document.get("time") or {}
        if not isinstance(versions, dict) or not isinstance(times, dict):
            raise HostAPIError(
                f"Malformed version listing for npm package {identifier}",
                host=self.host,
            )

        releases = []
        for version in versions:
            releases.append(
                RawRelease(
                    version=version,
                    url=PACKAGE_URL.format(name=identifier, version=version),
                    published_at=_parse_timestamp(times.get(version)),
                )
            )

        return RawProjectData(
            name=document.get("name") or identifier,
            description=document.get("description"),
            releases=releases,
        )

    async def close(self) -> None:
        await self._http.aclose()


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.debug("Unparseable npm timestamp", value=value)
        return None
