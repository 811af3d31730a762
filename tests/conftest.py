"""
Pytest configuration and fixtures for requestguard tests
"""
import pytest
import os
from typing import Generator


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch) -> Generator:
    """Remove environment variables that change component behavior"""
    for var in [
        "FORWARDED_HEADERS_HEADER_NAME",
        "FORWARDED_HEADERS_KNOWN_PROXIES",
        "RUNNING_IN_CONTAINER",
        "RATE_LIMIT_ENABLED",
        "RATE_LIMIT_DEFAULT",
        "APP_TAGS",
        "WEBSITE_SITE_NAME",
    ]:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def public_ip():
    """Provide a public IPv4 address"""
    return "8.8.8.8"


@pytest.fixture
def make_client():
    """Factory fixture for test clients of the reference application"""
    from fastapi.testclient import TestClient
    from requestguard.main import create_app

    def _make_client(client=("203.0.113.10", 50000), **kwargs) -> TestClient:
        return TestClient(create_app(**kwargs), client=client, raise_server_exceptions=False)

    return _make_client
