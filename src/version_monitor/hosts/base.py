"""
Base host service.

A host service combines one remote client, an optional rate limiter and the
release reconciler behind a uniform contract. Subclasses supply the host tag
and the identifier syntax.
"""

from abc import ABC, abstractmethod

import structlog

from ..clients.base import RawProjectData, RemoteHostClient
from ..exceptions import (
    HostAPIError,
    InvalidIdentifierError,
    InvalidProjectError,
    PersistenceError,
)
from ..models import HostType, Project, Release
from ..polling.rate_limiter import RateLimiter
from ..polling.reconciler import diff
from ..storage.manager import ProjectStore

logger = structlog.get_logger(__name__)


class HostService(ABC):
    """
    Abstract base class for host services.

    Each concrete service handles the projects whose host tag matches its own
    ``host_type`` and is registered under ``host_identifier``.
    """

    host_identifier: str = ""
    host_type: HostType

    def __init__(
        self,
        client: RemoteHostClient,
        store: ProjectStore,
        rate_limiter: RateLimiter | None = None,
    ):
        """
        Initialize the host service.

        Args:
            client: Client for the remote host API
            store: Storage for newly found releases and updated projects
            rate_limiter: Optional gate for hosts with a call budget
        """
        self.client = client
        self.store = store
        self.rate_limiter = rate_limiter

    @abstractmethod
    def valid_identifier(self, identifier: str) -> bool:
        """
        Check an identifier against the host's syntax. No I/O.

        Args:
            identifier: Candidate project identifier

        Returns:
            True if the identifier is well formed for this host
        """
        pass

    def is_satisfied_by(self, project: Project) -> bool:
        """Check whether this service handles the given project."""
        return project.host_type == self.host_type

    async def get_project(
        self, identifier: str, raise_on_error: bool = False
    ) -> Project | None:
        """
        Fetch current metadata and the full release list of a project.

        Args:
            identifier: Host specific project identifier
            raise_on_error: Propagate host API failures instead of returning None

        Returns:
            A fresh project, or None if it does not exist or could not be read

        Raises:
            InvalidIdentifierError: If the identifier is malformed
            HostAPIError: If the host could not be read and raise_on_error is set
        """
        if not self.valid_identifier(identifier):
            raise InvalidIdentifierError(
                f"Illegal {self.host_identifier} identifier: {identifier!r}",
                identifier=identifier,
                host=self.host_identifier,
            )

        logger.debug(
            "Fetching project", host=self.host_identifier, project=identifier
        )

        try:
            raw = await self.client.fetch_project(identifier)
        except HostAPIError as e:
            logger.warning(
                "Could not fetch project",
                host=self.host_identifier,
                project=identifier,
                status_code=e.status_code,
                error=str(e),
            )
            if raise_on_error:
                raise
            return None

        if raw is None:
            logger.info(
                "Project not found", host=self.host_identifier, project=identifier
            )
            return None

        return self._build_project(identifier, raw)

    def _build_project(self, identifier: str, raw: RawProjectData) -> Project:
        project = Project(
            identifier=identifier,
            host_type=self.host_type,
            name=raw.name,
            description=raw.description,
        )

        for raw_release in raw.releases:
            if project.has_version(raw_release.version):
                continue
            project.add_release(
                Release(
                    version=raw_release.version,
                    url=raw_release.url,
                    published_at=raw_release.published_at,
                )
            )

        return project

    async def check(self, project: Project) -> list[Release]:
        """
        Find, persist and return the releases of a project not seen before.

        Args:
            project: A tracked project of this service's host type

        Returns:
            New releases in host order; empty when rate limited, when the
            project cannot be read, or when nothing changed. If the store
            fails partway, only the releases saved before the failure

        Raises:
            InvalidProjectError: If the project belongs to another host
        """
        if not self.is_satisfied_by(project):
            raise InvalidProjectError(
                f"Project is not a {self.host_identifier} project: {project!r}"
            )

        log = logger.bind(host=self.host_identifier, project=project.identifier)

        limiter = self.rate_limiter
        if limiter is not None and not await limiter.should_proceed():
            log.info("Reached rate limit, returning no new releases")
            return []

        remote = await self.get_project(project.identifier)
        if remote is None:
            log.warning("Could not read project from host, returning no new releases")
            return []

        new_releases = diff(project.releases, remote.releases)

        # A release is appended only once saved; the project never holds an
        # unsaved release and never misses a saved one.
        saved: list[Release] = []
        try:
            for release in new_releases:
                release.project = project
                await self.store.save_release(release)
                project.add_release(release)
                saved.append(release)

            if saved:
                await self.store.save_project(project)
        except PersistenceError as e:
            log.error(
                "Failed to persist releases, returning those already saved",
                saved=len(saved),
                pending=len(new_releases) - len(saved),
                error=str(e),
            )

        log.debug("Found new releases", count=len(saved))
        return saved

    async def close(self) -> None:
        await self.client.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(host={self.host_identifier!r})"
