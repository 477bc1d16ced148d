"""
Release notifications.

Notifiers are fire-and-forget from the polling engine's point of view: a
failed notification never affects what has been stored.
"""

from abc import ABC, abstractmethod
from typing import Any

import httpx
import structlog

from .config import Settings
from .exceptions import NotificationError
from .models import Project, Release

logger = structlog.get_logger(__name__)


class Notifier(ABC):
    """Abstract base class for release notifiers."""

    @abstractmethod
    async def notify(self, project: Project, release: Release) -> None:
        """
        Announce a newly found release.

        Args:
            project: Project the release belongs to
            release: The new release
        """
        pass

    async def close(self) -> None:
        return None


class LoggingNotifier(Notifier):
    """Notifier that only writes a log entry."""

    async def notify(self, project: Project, release: Release) -> None:
        logger.info(
            "New release",
            host=project.host_type.value,
            project=project.identifier,
            version=release.version,
            url=release.url,
        )


class SlackNotifier(Notifier):
    """Posts new releases to a Slack incoming webhook."""

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.webhook_url = webhook_url
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    def build_message(self, project: Project, release: Release) -> dict[str, Any]:
        text = f"New release of {project.name}: {release.version}"
        if release.url:
            text += f" <{release.url}>"
        return {"text": text}

    async def notify(self, project: Project, release: Release) -> None:
        """
        Post the release to Slack.

        Raises:
            NotificationError: If the webhook call fails
        """
        try:
            response = await self._http.post(
                self.webhook_url, json=self.build_message(project, release)
            )
        except httpx.HTTPError as e:
            raise NotificationError(f"Failed to reach Slack webhook: {e}") from e

        if response.status_code >= 300:
            raise NotificationError(
                f"Slack webhook rejected notification: {response.status_code}",
                context={"project": project.identifier, "version": release.version},
            )

        logger.debug(
            "Slack notification sent",
            project=project.identifier,
            version=release.version,
        )

    async def close(self) -> None:
        await self._http.aclose()


def create_notifier(settings: Settings) -> Notifier:
    """Get the Slack notifier if a webhook is configured, else a logging one."""
    if settings.slack_webhook_url:
        return SlackNotifier(settings.slack_webhook_url, settings.http_timeout_seconds)
    return LoggingNotifier()
