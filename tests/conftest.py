"""
Test configuration and fixtures for the URL shortener.
This centralizes all test setup, making individual tests clean.
"""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shorturl_app.config import Settings
from shorturl_app.services.allocator import IdentifierAllocator
from shorturl_app.services.url_service import URLService
from shorturl_app.storage.strategies import InMemoryStorage

TEST_TOKEN = "secret"


@pytest.fixture(scope="function")
def settings():
    """Explicit settings so the test run never depends on the environment."""
    return Settings(token=TEST_TOKEN, id_length=3, storage="memory", _env_file=None)


@pytest.fixture(scope="function")
def storage():
    """A fresh in-memory store for each test."""
    return InMemoryStorage()


@pytest.fixture(scope="function")
def url_service(storage, settings):
    allocator = IdentifierAllocator(storage, length=settings.id_length)
    return URLService(storage=storage, allocator=allocator, token=settings.token)


@pytest.fixture(scope="function")
def client(settings, storage):
    """
    Create a test client backed by the test's in-memory store.
    This is the main fixture that HTTP tests will use.
    """
    app = create_app(settings=settings, storage=storage)

    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return {"token": TEST_TOKEN}
