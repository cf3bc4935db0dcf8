"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from src.config import Settings
from src.core.books.repository import BookRepository
from src.core.books.storage import InMemoryStorage, JsonFileStorage
from src.main import create_app


@pytest.fixture
def data_file(tmp_path):
    """Path of a books file that does not exist yet."""
    return tmp_path / "books.json"


@pytest.fixture
def settings(data_file):
    """Settings pointing at a temporary data file with the default seed."""
    return Settings(data_file=data_file, storage_backend="file")


@pytest.fixture
def client(settings):
    """Create a test client for a freshly seeded app."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def empty_client(data_file):
    """Create a test client for an app with no starter books."""
    settings = Settings(data_file=data_file, storage_backend="file", seed_titles=[])
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
async def repository(data_file):
    """File-backed repository initialized with an empty catalog."""
    repo = BookRepository(JsonFileStorage(data_file), seed_titles=[])
    await repo.initialize()
    return repo


@pytest.fixture
async def memory_repository():
    """In-memory repository initialized with an empty catalog."""
    repo = BookRepository(InMemoryStorage(), seed_titles=[])
    await repo.initialize()
    return repo
