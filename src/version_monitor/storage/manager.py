"""
Project storage for Version Monitor.

Provides the persistence interface the host services and scheduler depend on,
and an in-memory backend. Writes are idempotent upserts keyed by host,
project identifier and release version.
"""

import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any

from ..exceptions import PersistenceError
from ..models import HostType, Project, Release

logger = logging.getLogger(__name__)


class ProjectStore(ABC):
    """Abstract base class for project storage."""

    @abstractmethod
    async def save_release(self, release: Release) -> None:
        """
        Store a release for the project it is bound to.

        Args:
            release: Release with its project back-reference set

        Raises:
            PersistenceError: If the release is not bound to a project
        """
        pass

    @abstractmethod
    async def save_project(self, project: Project) -> None:
        """
        Store project metadata and every release it currently holds.

        Args:
            project: Project to store
        """
        pass

    @abstractmethod
    async def list_tracked_projects(self) -> list[Project]:
        """
        Get every tracked project with its stored releases.

        Returns:
            List of projects
        """
        pass

    @abstractmethod
    async def add_project(self, project: Project) -> None:
        """
        Start tracking a project, taking its current releases as known.

        Args:
            project: Project to track
        """
        pass

    @abstractmethod
    async def get_project(self, host_type: HostType, identifier: str) -> Project | None:
        """
        Get a tracked project.

        Args:
            host_type: Host the project lives on
            identifier: Host specific identifier

        Returns:
            Project or None if not tracked
        """
        pass

    @abstractmethod
    async def remove_project(self, host_type: HostType, identifier: str) -> bool:
        """
        Stop tracking a project.

        Returns:
            True if the project was tracked
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the storage backend is healthy.

        Returns:
            True if healthy, False otherwise
        """
        pass


class InMemoryProjectStore(ProjectStore):
    """In-memory project storage."""

    def __init__(self) -> None:
        """Initialize in-memory project store."""
        self.projects: dict[tuple[HostType, str], dict[str, Any]] = {}
        # Insertion ordered per project, keyed by version
        self.releases: dict[tuple[HostType, str], dict[str, dict[str, Any]]] = {}

    async def save_release(self, release: Release) -> None:
        """Upsert a release under its project."""
        project = release.project
        if project is None:
            raise PersistenceError(
                f"Release {release.version} is not bound to a project"
            )

        key = project.key
        if key not in self.projects:
            self._store_metadata(project)

        stored = self.releases.setdefault(key, {})
        if release.version in stored:
            logger.debug(
                f"Release {release.version} of {project.identifier} already stored"
            )
            return

        stored[release.version] = release.to_dict()
        logger.debug(f"Stored release {release.version} of {project.identifier}")

    async def save_project(self, project: Project) -> None:
        """Upsert project metadata and its releases."""
        self._store_metadata(project)

        stored = self.releases.setdefault(project.key, {})
        for release in project.releases:
            stored.setdefault(release.version, release.to_dict())

        logger.debug(
            f"Stored project {project.identifier} with {len(stored)} releases"
        )

    async def list_tracked_projects(self) -> list[Project]:
        """Rebuild every tracked project from stored records."""
        return [self._build_project(key) for key in self.projects]

    async def add_project(self, project: Project) -> None:
        """Track a project with its current releases as the known baseline."""
        await self.save_project(project)
        logger.info(
            f"Tracking {project.host_type.value} project {project.identifier} "
            f"with {len(project.releases)} known releases"
        )

    async def get_project(self, host_type: HostType, identifier: str) -> Project | None:
        """Get a tracked project rebuilt from stored records."""
        key = (HostType(host_type), identifier)
        if key not in self.projects:
            return None
        return self._build_project(key)

    async def remove_project(self, host_type: HostType, identifier: str) -> bool:
        """Forget a project and its releases."""
        key = (HostType(host_type), identifier)
        if key not in self.projects:
            return False

        del self.projects[key]
        self.releases.pop(key, None)
        logger.info(f"Stopped tracking {key[0].value} project {identifier}")
        return True

    async def health_check(self) -> bool:
        """Check if in-memory storage is healthy (always true for memory)."""
        return True

    def _store_metadata(self, project: Project) -> None:
        self.projects[project.key] = {
            "identifier": project.identifier,
            "host_type": project.host_type.value,
            "name": project.name,
            "description": project.description,
            "last_updated": datetime.now(UTC).isoformat(),
        }

    def _build_project(self, key: tuple[HostType, str]) -> Project:
        data = dict(self.projects[key])
        data["releases"] = list(self.releases.get(key, {}).values())
        return Project.from_dict(data)

    def get_memory_stats(self) -> dict[str, Any]:
        """Get storage statistics."""
        return {
            "projects_count": len(self.projects),
            "releases_count": sum(len(r) for r in self.releases.values()),
        }


class StoreFactory:
    """Factory for creating the configured storage backend."""

    @staticmethod
    def create_store(backend: str) -> ProjectStore:
        """
        Create a project store.

        Args:
            backend: Storage backend name

        Returns:
            ProjectStore instance

        Raises:
            ValueError: If the backend is not supported
        """
        backend = backend.lower()

        if backend == "memory":
            logger.info("Creating in-memory project store")
            return InMemoryProjectStore()
        else:
            raise ValueError(
                f"Unknown storage backend: {backend}. Supported backends: 'memory'"
            )

    @staticmethod
    def get_supported_backends() -> list[str]:
        """Get list of supported storage backends."""
        return ["memory"]
