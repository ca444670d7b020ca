"""Pytest configuration and shared fixtures for openstack-client-core tests."""

import pytest

from openstack_client_core.testing import PageServer, mock_service_client


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear OpenStack and test environment variables before each test.

    This prevents a developer's sourced openrc from leaking into tests.
    """
    import os

    test_prefixes = ("OS_", "TEST_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def page_server():
    return PageServer()


@pytest.fixture
async def client(page_server):
    service_client = mock_service_client(page_server)
    yield service_client
    await service_client.aclose()
