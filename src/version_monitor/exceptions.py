"""
Custom exceptions for Version Monitor.

Validation and configuration problems are raised to the caller. Remote and
persistence failures are raised inside clients and stores and reduced to
"no new releases" by the host services and the polling scheduler.
"""

from typing import Any


class VersionMonitorError(Exception):
    """Base exception for Version Monitor errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code or "VERSION_MONITOR_ERROR"
        self.context = context or {}


class InvalidIdentifierError(VersionMonitorError):
    """Exception for identifiers that violate a host's syntax."""

    def __init__(
        self,
        message: str,
        identifier: str | None = None,
        host: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "INVALID_IDENTIFIER", context)
        self.identifier = identifier
        self.host = host


class InvalidProjectError(VersionMonitorError):
    """Exception for projects handed to a host service of another type."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, "INVALID_PROJECT", context)


class HostAPIError(VersionMonitorError):
    """Exception for remote host API failures (network, timeout, bad payload)."""

    def __init__(
        self,
        message: str,
        host: str | None = None,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "HOST_API_ERROR", context)
        self.host = host
        self.status_code = status_code


class NotificationError(VersionMonitorError):
    """Exception for notification delivery errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, "NOTIFICATION_ERROR", context)


class PersistenceError(VersionMonitorError):
    """Exception for storage related errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, "PERSISTENCE_ERROR", context)


class ConfigurationError(VersionMonitorError):
    """Exception for configuration related errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, code or "CONFIGURATION_ERROR", context)


class DuplicateHostError(ConfigurationError):
    """Raised when a host identifier is registered twice."""

    def __init__(self, message: str, host: str | None = None):
        super().__init__(message, "DUPLICATE_HOST", {"host": host})
        self.host = host


class NoMatchingHostError(ConfigurationError):
    """Raised when no registered host service accepts a project."""

    def __init__(self, message: str, host: str | None = None):
        super().__init__(message, "NO_MATCHING_HOST", {"host": host})
        self.host = host


class AmbiguousHostError(ConfigurationError):
    """Raised when more than one registered host service accepts a project."""

    def __init__(self, message: str, hosts: list[str] | None = None):
        super().__init__(message, "AMBIGUOUS_HOST", {"hosts": hosts or []})
        self.hosts = hosts or []
