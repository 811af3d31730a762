"""
Tests for environment and version helpers
"""
from importlib import metadata
from unittest.mock import patch

import pytest

from requestguard.utils import (
    format_app_version,
    get_app_version,
    get_environment_tags,
    is_non_stable_version,
    is_running_in_container,
    is_running_on_azure_app_service,
)


class TestEnvironmentDetection:

    def test_azure_app_service(self, monkeypatch):
        assert is_running_on_azure_app_service() is False

        monkeypatch.setenv("WEBSITE_SITE_NAME", "my-site")
        assert is_running_on_azure_app_service() is True

    def test_azure_app_service_blank(self, monkeypatch):
        monkeypatch.setenv("WEBSITE_SITE_NAME", "  ")
        assert is_running_on_azure_app_service() is False

    @pytest.mark.parametrize("value,expected", [("true", True), ("false", False), ("TRUE", False), ("1", False)])
    def test_container(self, monkeypatch, value, expected):
        monkeypatch.setenv("RUNNING_IN_CONTAINER", value)
        assert is_running_in_container() is expected

    def test_container_unset(self):
        assert is_running_in_container() is False


class TestEnvironmentTags:

    def test_unset(self):
        assert get_environment_tags() == [""]

    def test_blank(self, monkeypatch):
        monkeypatch.setenv("APP_TAGS", "   ")
        assert get_environment_tags() == [""]

    def test_valid_tags(self, monkeypatch):
        monkeypatch.setenv("APP_TAGS", "prod, api-v1 ,feature#123,[eu]/west,$(x)@y")
        assert get_environment_tags() == ["prod", "api-v1", "feature#123", "[eu]/west", "$(x)@y"]

    def test_invalid_tags_dropped(self, monkeypatch):
        monkeypatch.setenv("APP_TAGS", "good,has space,semi;colon,,ok")
        assert get_environment_tags() == ["good", "ok"]

    def test_custom_variable(self, monkeypatch):
        monkeypatch.setenv("CUSTOM_TAGS", "a,b")
        assert get_environment_tags("CUSTOM_TAGS") == ["a", "b"]


class TestFormatAppVersion:

    @pytest.mark.parametrize("informational,expected", [
        ("1.2.3+4f2a9c81d0", "1.2.3 (4f2a9c)"),
        ("1.2.3+abc123", "1.2.3+abc123"),
        ("1.2.3", "1.2.3"),
        ("+abcdef123", "+abcdef123"),
        ("2.0.0-beta.1+0123456789abcdef", "2.0.0-beta.1 (012345)"),
    ])
    def test_format(self, informational, expected):
        assert format_app_version(informational) == expected

    def test_missing_informational(self):
        assert format_app_version(None, "1.0.0.0") == "1.0.0.0"
        assert format_app_version(None) == "N/A"

    def test_get_app_version_not_installed(self):
        with patch("requestguard.utils.version.metadata.version", side_effect=metadata.PackageNotFoundError):
            assert get_app_version() == "N/A"

    def test_get_app_version_installed(self):
        with patch("requestguard.utils.version.metadata.version", return_value="0.3.0+deadbeef42"):
            assert get_app_version() == "0.3.0 (deadbe)"


class TestNonStableVersion:

    @pytest.mark.parametrize("version", [
        "1.0.0-preview", "2.0.0-beta.1", "1.0.0-rc.2", "1.0 (Debug)",
        "3.0.0-alpha", "test build", "1.0.0-canary", "nightly 2024-05-01", "1.0-BETA",
    ])
    def test_non_stable(self, version):
        assert is_non_stable_version(version) is True

    @pytest.mark.parametrize("version", ["1.0.0", "2.3.4 (abcdef)", "1.0.0-beta1", "latest", "", None])
    def test_stable(self, version):
        assert is_non_stable_version(version) is False
