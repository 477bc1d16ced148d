"""
Configuration management for Version Monitor.

This module handles environment variables, settings validation, and configuration
management using Pydantic Settings for type safety and validation.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_HOSTS = {"github", "npm"}


class GitHubConfig(BaseModel):
    """GitHub host configuration settings."""

    oauth_token: str = Field(default="", description="GitHub OAuth token")
    api_url: str = Field(default="https://api.github.com", description="API URL")
    rate_limit_buffer: int = Field(
        default=100, description="Safety buffer subtracted from remaining calls"
    )
    timeout_seconds: float = Field(default=30.0, description="Request timeout")


class NpmConfig(BaseModel):
    """npm registry configuration settings."""

    registry_url: str = Field(
        default="https://registry.npmjs.org", description="npm registry URL"
    )
    timeout_seconds: float = Field(default=30.0, description="Request timeout")


class PollingConfig(BaseModel):
    """Polling configuration settings."""

    interval_seconds: int = Field(
        default=600, description="Polling interval in seconds (10 minutes)"
    )
    concurrent_projects: int = Field(
        default=5, description="Number of projects to check concurrently"
    )
    error_backoff_seconds: int = Field(
        default=60, description="Delay after an unexpected polling loop error"
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Hosts
    enabled_hosts: str | list[str] = Field(
        default="github,npm",
        description="Hosts to register at startup (comma-separated)",
    )

    # GitHub configuration
    github_oauth_token: str = Field(
        default="", description="GitHub OAuth token (required when GitHub is enabled)"
    )
    github_api_url: str = Field(
        default="https://api.github.com", description="GitHub API URL"
    )
    github_rate_limit_buffer: int = Field(
        default=100, description="GitHub rate limit safety buffer"
    )

    # npm configuration
    npm_registry_url: str = Field(
        default="https://registry.npmjs.org", description="npm registry URL"
    )

    http_timeout_seconds: float = Field(
        default=30.0, description="Timeout for every remote fetch in seconds"
    )

    # Polling configuration
    polling_interval_seconds: int = Field(
        default=600, description="Polling interval in seconds"
    )
    polling_concurrent_projects: int = Field(
        default=5, description="Number of projects to check concurrently"
    )
    polling_error_backoff_seconds: int = Field(
        default=60, description="Backoff after a polling loop error in seconds"
    )

    # Storage
    storage_backend: str = Field(default="memory", description="Storage backend")
    tracked_projects: str | list[str] = Field(
        default="",
        description="Projects to track at startup "
        "(comma-separated host:identifier entries, e.g. github:apple/swift)",
    )

    # Notifications
    slack_webhook_url: str = Field(
        default="", description="Slack incoming webhook URL (empty to only log)"
    )

    # Logging configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Log format")

    @field_validator("enabled_hosts", mode="before")
    @classmethod
    def parse_enabled_hosts(cls, v: Any) -> list[str]:
        """Parse enabled hosts from comma-separated string or list."""
        if isinstance(v, str):
            return [host.strip().lower() for host in v.split(",") if host.strip()]
        elif isinstance(v, list):
            return [str(host).strip().lower() for host in v]
        else:
            error_msg = f"enabled_hosts must be a string or list, got {type(v)}"
            raise ValueError(error_msg)

    @field_validator("enabled_hosts")
    @classmethod
    def validate_enabled_hosts(cls, v: list[str]) -> list[str]:
        """Validate enabled hosts list."""
        for host in v:
            if host not in SUPPORTED_HOSTS:
                raise ValueError(f"Unsupported host: {host}")
        return v

    @field_validator("tracked_projects", mode="before")
    @classmethod
    def parse_tracked_projects(cls, v: Any) -> list[str]:
        """Parse tracked projects from comma-separated string or list."""
        if isinstance(v, str):
            if not v.strip():
                return []
            return [entry.strip() for entry in v.split(",") if entry.strip()]
        elif isinstance(v, list):
            return v
        else:
            error_msg = f"tracked_projects must be a string or list, got {type(v)}"
            raise ValueError(error_msg)

    @field_validator("tracked_projects")
    @classmethod
    def validate_tracked_projects(cls, v: list[str]) -> list[str]:
        """Validate tracked project entries have the host:identifier form."""
        for entry in v:
            host, _, identifier = entry.partition(":")
            if not host or not identifier:
                raise ValueError(
                    f"Invalid tracked project entry: {entry} "
                    "(expected host:identifier)"
                )
        return v

    @field_validator("github_rate_limit_buffer")
    @classmethod
    def validate_rate_limit_buffer(cls, v: int) -> int:
        if v < 0:
            raise ValueError("github_rate_limit_buffer must not be negative")
        return v

    @field_validator("polling_concurrent_projects")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("polling_concurrent_projects must be at least 1")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        if v.lower() not in {"json", "console"}:
            raise ValueError(f"Invalid log format: {v}")
        return v.lower()

    @property
    def github_config(self) -> GitHubConfig:
        """Get GitHub configuration."""
        return GitHubConfig(
            oauth_token=self.github_oauth_token,
            api_url=self.github_api_url,
            rate_limit_buffer=self.github_rate_limit_buffer,
            timeout_seconds=self.http_timeout_seconds,
        )

    @property
    def npm_config(self) -> NpmConfig:
        """Get npm configuration."""
        return NpmConfig(
            registry_url=self.npm_registry_url,
            timeout_seconds=self.http_timeout_seconds,
        )

    @property
    def polling_config(self) -> PollingConfig:
        """Get polling configuration."""
        return PollingConfig(
            interval_seconds=self.polling_interval_seconds,
            concurrent_projects=self.polling_concurrent_projects,
            error_backoff_seconds=self.polling_error_backoff_seconds,
        )

    def get_tracked_projects(self) -> list[tuple[str, str]]:
        """Get (host, identifier) pairs of projects to seed at startup."""
        entries = self.tracked_projects
        if isinstance(entries, str):
            entries = [e.strip() for e in entries.split(",") if e.strip()]

        pairs = []
        for entry in entries:
            host, _, identifier = entry.partition(":")
            pairs.append((host.strip().lower(), identifier.strip()))
        return pairs


# Global settings instance - initialized lazily to avoid import-time errors
_settings_instance = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
