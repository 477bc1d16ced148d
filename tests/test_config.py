"""
Tests for configuration loading.
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

import version_monitor.config
from version_monitor.config import Settings, get_settings


class TestSettings:
    """Test Settings parsing and validation."""

    def test_defaults(self):
        """Test default settings without environment."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.enabled_hosts == ["github", "npm"]
        assert settings.github_oauth_token == ""
        assert settings.github_rate_limit_buffer == 100
        assert settings.polling_interval_seconds == 600
        assert settings.tracked_projects == []

    def test_from_environment(self):
        """Test settings are read from the environment."""
        with patch.dict(
            os.environ,
            {
                "ENABLED_HOSTS": "NPM",
                "GITHUB_OAUTH_TOKEN": "token",
                "TRACKED_PROJECTS": "npm:left-pad, github:apple/swift",
                "POLLING_INTERVAL_SECONDS": "30",
            },
            clear=True,
        ):
            settings = Settings(_env_file=None)

        assert settings.enabled_hosts == ["npm"]
        assert settings.github_oauth_token == "token"
        assert settings.polling_interval_seconds == 30
        assert settings.get_tracked_projects() == [
            ("npm", "left-pad"),
            ("github", "apple/swift"),
        ]

    def test_scoped_npm_tracked_project(self):
        """Test scoped npm tracked project."""
        settings = Settings(_env_file=None, tracked_projects="npm:@angular/core")

        assert settings.get_tracked_projects() == [("npm", "@angular/core")]

    def test_unknown_host_rejected(self):
        """Test unknown host rejected."""
        with pytest.raises(ValidationError, match="Unsupported host"):
            Settings(_env_file=None, enabled_hosts="github,pypi")

    def test_malformed_tracked_project_rejected(self):
        """Test malformed tracked project rejected."""
        with pytest.raises(ValidationError, match="host:identifier"):
            Settings(_env_file=None, tracked_projects="apple/swift")

    def test_invalid_log_level(self):
        """Test an unknown log level is rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="LOUD")

    def test_negative_buffer_rejected(self):
        """Test negative buffer rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, github_rate_limit_buffer=-1)

    def test_grouped_views(self):
        """Test the grouped configuration views."""
        settings = Settings(
            _env_file=None,
            github_oauth_token="token",
            github_rate_limit_buffer=25,
            http_timeout_seconds=5,
            polling_concurrent_projects=2,
        )

        assert settings.github_config.oauth_token == "token"
        assert settings.github_config.rate_limit_buffer == 25
        assert settings.github_config.timeout_seconds == 5
        assert settings.npm_config.timeout_seconds == 5
        assert settings.polling_config.concurrent_projects == 2


def test_get_settings_is_cached():
    """Test get_settings returns one cached instance."""
    version_monitor.config._settings_instance = None

    with patch.dict(os.environ, {"GITHUB_OAUTH_TOKEN": "cached"}, clear=True):
        first = get_settings()
        second = get_settings()

    assert first is second
    assert first.github_oauth_token == "cached"

    version_monitor.config._settings_instance = None
