"""Pytest configuration and shared fixtures for waypoint-templates tests."""

import pytest

from waypoint_templates.auth import CredentialResolver
from waypoint_templates.testing import FakeTemplateService


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear test-related environment variables before each test.

    This prevents a developer's Waypoint settings from leaking into tests.
    """
    import os

    test_prefixes = ("TEST_", "API_", "WAYPOINT_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def resolver():
    """Resolver that never reads a .env file."""
    return CredentialResolver(load_dotenv=False)


@pytest.fixture
def fake_service():
    """Fake Waypoint server holding one template named "api"."""
    service = FakeTemplateService()
    service.add(
        {
            "id": "tmpl-1",
            "name": "api",
            "summary": "old",
            "expandedSummary": "old expanded",
            "readmeMarkdownTemplate": "IyBSRUFETUU=",  # "# README"
            "terraformNocodeModule": {"source": "acme/service/aws", "version": "1.0.0"},
            "tags": ["a"],
        }
    )
    return service
