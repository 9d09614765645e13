"""Shared pytest fixtures for all tests."""

import pytest
from fastapi.testclient import TestClient

from feedback_import.config import settings
from feedback_import.database import close_database, init_database
from feedback_import.imports.service import ImportService, ImportSessionStore, session_store
from feedback_import.posts.repository import PostRepository
from feedback_import.posts.service import PostService
from tests.helpers import FakePostCreator


@pytest.fixture
async def db(tmp_path):
    """Initialize a fresh SQLite database file for one test.

    Yields:
        aiosqlite.Connection: Connection with the posts and votes tables created.
    """
    conn = await init_database(str(tmp_path / "test.db"))
    yield conn
    await close_database()


@pytest.fixture
def post_service(db):
    return PostService(PostRepository(db))


@pytest.fixture
def fake_creator():
    return FakePostCreator()


@pytest.fixture
def import_service(fake_creator):
    """ImportService backed by the fake creator, a private session store and no batch delay."""
    return ImportService(fake_creator, store=ImportSessionStore(), batch_delay=0)


@pytest.fixture
def client(tmp_path, monkeypatch):
    """HTTP client against the full app with a temporary database.

    Yields:
        TestClient: Client with the application lifespan running.
    """
    monkeypatch.setattr(settings, "db_path", str(tmp_path / "api.db"))
    monkeypatch.setattr(settings, "import_batch_delay_seconds", 0.0)

    from feedback_import.main import app

    with TestClient(app) as test_client:
        yield test_client

    session_store.clear()
