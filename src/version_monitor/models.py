"""
Domain model for Version Monitor.

A Project is one tracked repository or package on a host. It owns an ordered,
append-only list of Releases. Each Release keeps a weak reference back to its
Project for traversal.
"""

import weakref
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Optional


class HostType(str, Enum):
    """Supported hosts. Each project carries exactly one."""

    GITHUB = "github"
    NPM = "npm"


class Release:
    """A single discovered version of a project."""

    def __init__(
        self,
        version: str,
        url: str = "",
        published_at: datetime | None = None,
        project: Optional["Project"] = None,
    ):
        self.version = version
        self.url = url
        self.published_at = published_at or datetime.now(UTC)
        self._project_ref: weakref.ReferenceType["Project"] | None = None
        if project is not None:
            self.project = project

    @property
    def project(self) -> Optional["Project"]:
        """Owning project, or None if unbound or already collected."""
        if self._project_ref is None:
            return None
        return self._project_ref()

    @project.setter
    def project(self, project: Optional["Project"]) -> None:
        self._project_ref = weakref.ref(project) if project is not None else None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        project = self.project
        return {
            "version": self.version,
            "url": self.url,
            "published_at": self.published_at.isoformat(),
            "project": project.identifier if project is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Release":
        """Create Release from dictionary."""
        published_at = data.get("published_at")
        return cls(
            version=data["version"],
            url=data.get("url", ""),
            published_at=(
                datetime.fromisoformat(published_at) if published_at else None
            ),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Release):
            return NotImplemented
        return (
            self.version == other.version
            and self.url == other.url
            and self.published_at == other.published_at
        )

    def __hash__(self) -> int:
        return hash((self.version, self.url, self.published_at))

    def __repr__(self) -> str:
        return f"Release(version={self.version!r}, url={self.url!r})"


class Project:
    """
    A tracked project on a specific host.

    The identifier is host specific (``owner/repo`` on GitHub, the package
    name on npm) and cannot change once the project is created.
    """

    def __init__(
        self,
        identifier: str,
        host_type: HostType,
        name: str = "",
        description: str = "",
        releases: list[Release] | None = None,
    ):
        self._identifier = identifier
        self.host_type = HostType(host_type)
        self.name = name or identifier
        self.description = description or ""
        self._releases: list[Release] = []

        for release in releases or []:
            self.add_release(release)

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def key(self) -> tuple[HostType, str]:
        """Storage key, unique across hosts."""
        return self.host_type, self._identifier

    @property
    def releases(self) -> list[Release]:
        """Releases in discovery order. A copy; use add_release to append."""
        return list(self._releases)

    @property
    def versions(self) -> list[str]:
        return [release.version for release in self._releases]

    def has_version(self, version: str) -> bool:
        return any(release.version == version for release in self._releases)

    def add_release(self, release: Release) -> None:
        """
        Append a release and point its back-reference at this project.

        Raises:
            ValueError: If the version is already present
        """
        if self.has_version(release.version):
            raise ValueError(
                f"Release {release.version} already exists for {self._identifier}"
            )

        release.project = self
        self._releases.append(release)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "identifier": self._identifier,
            "host_type": self.host_type.value,
            "name": self.name,
            "description": self.description,
            "releases": [release.to_dict() for release in self._releases],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Project":
        """Create Project from dictionary."""
        return cls(
            identifier=data["identifier"],
            host_type=HostType(data["host_type"]),
            name=data.get("name", ""),
            description=data.get("description", ""),
            releases=[Release.from_dict(r) for r in data.get("releases", [])],
        )

    def __repr__(self) -> str:
        return (
            f"Project(identifier={self._identifier!r}, "
            f"host_type={self.host_type.value!r}, releases={len(self._releases)})"
        )


class RateLimitSnapshot:
    """Rate limit figures as reported by a host."""

    def __init__(self, remaining: int, limit: int, reset_time: datetime):
        self.remaining = remaining
        self.limit = limit
        self.reset_time = reset_time
