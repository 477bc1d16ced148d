"""
Host registry.

Maps host identifiers to host services. The registry is filled once during
startup, frozen, and then only read by the polling scheduler.
"""

from collections.abc import Iterator

import structlog

from ..clients.github import GitHubClient
from ..clients.npm import NpmClient
from ..config import Settings
from ..exceptions import (
    AmbiguousHostError,
    ConfigurationError,
    DuplicateHostError,
    NoMatchingHostError,
)
from ..models import Project
from ..polling.rate_limiter import RateLimiter
from ..storage.manager import ProjectStore
from .base import HostService
from .github import GitHubHostService
from .npm import NpmHostService

logger = structlog.get_logger(__name__)


class HostRegistry:
    """Registry of host services, write-once at startup."""

    def __init__(self) -> None:
        self._services: dict[str, HostService] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def host_identifiers(self) -> list[str]:
        return list(self._services)

    def register(self, service: HostService) -> None:
        """
        Register a host service under its host identifier.

        Raises:
            DuplicateHostError: If the identifier is already registered
            ConfigurationError: If the registry has been frozen
        """
        host = service.host_identifier
        if self._frozen:
            raise ConfigurationError(
                f"Cannot register {host}: host registry is frozen"
            )
        if host in self._services:
            raise DuplicateHostError(f"Host already registered: {host}", host=host)

        self._services[host] = service
        logger.info("Host service registered", host=host)

    def freeze(self) -> None:
        """
        Make the registry read-only.

        Raises:
            AmbiguousHostError: If two services handle the same host type
        """
        by_type: dict[str, list[str]] = {}
        for host, service in self._services.items():
            by_type.setdefault(service.host_type.value, []).append(host)

        for host_type, hosts in by_type.items():
            if len(hosts) > 1:
                raise AmbiguousHostError(
                    f"Multiple host services handle {host_type} projects", hosts=hosts
                )

        self._frozen = True
        logger.info("Host registry frozen", hosts=self.host_identifiers)

    def resolve(self, project: Project) -> HostService:
        """
        Get the host service responsible for a project.

        Raises:
            NoMatchingHostError: If no service handles the project
            AmbiguousHostError: If more than one service does
        """
        matches = [s for s in self._services.values() if s.is_satisfied_by(project)]

        if not matches:
            raise NoMatchingHostError(
                f"No host service for {project.host_type.value} project "
                f"{project.identifier}",
                host=project.host_type.value,
            )
        if len(matches) > 1:
            raise AmbiguousHostError(
                f"Multiple host services match project {project.identifier}",
                hosts=[s.host_identifier for s in matches],
            )

        return matches[0]

    def get(self, host: str) -> HostService:
        """
        Get a host service by identifier.

        Raises:
            NoMatchingHostError: If the host is not registered
        """
        try:
            return self._services[host]
        except KeyError:
            raise NoMatchingHostError(f"Unknown host: {host}", host=host) from None

    async def close(self) -> None:
        """Close every registered service."""
        for host, service in self._services.items():
            try:
                await service.close()
            except Exception as e:
                logger.warning("Failed to close host service", host=host, error=str(e))

    def __contains__(self, host: object) -> bool:
        return host in self._services

    def __iter__(self) -> Iterator[HostService]:
        return iter(list(self._services.values()))

    def __len__(self) -> int:
        return len(self._services)


def create_host_service(
    host: str, settings: Settings, store: ProjectStore
) -> HostService:
    """
    Create the host service for one enabled host.

    Raises:
        ConfigurationError: If the host is unknown or misconfigured
    """
    if host == "github":
        github_config = settings.github_config
        client = GitHubClient(github_config)
        rate_limiter = RateLimiter(host, client, github_config.rate_limit_buffer)
        return GitHubHostService(client, store, rate_limiter)
    elif host == "npm":
        return NpmHostService(NpmClient(settings.npm_config), store)
    else:
        raise ConfigurationError(f"Unsupported host: {host}")


def build_registry(settings: Settings, store: ProjectStore) -> HostRegistry:
    """
    Build and freeze the registry for every enabled host.

    Args:
        settings: Application settings
        store: Storage shared by all host services

    Returns:
        Frozen host registry
    """
    registry = HostRegistry()

    for host in settings.enabled_hosts:
        registry.register(create_host_service(host, settings, store))

    registry.freeze()
    return registry
