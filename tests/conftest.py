"""
Pytest configuration and shared fixtures.

Provides an initialised SQLite connection and an API client bound to a
temporary database.
"""

import pytest
from fastapi.testclient import TestClient

from database import get_connection, init_db
from main import app, get_db

BASE_URL = "https://example.test"


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "seo-test.db"


@pytest.fixture
def conn(db_path):
    """Provide an initialised database connection for a test function."""
    connection = get_connection(db_path)
    init_db(connection)
    yield connection
    connection.close()


@pytest.fixture
def client(conn, db_path):
    """API client whose requests use the test database."""

    def override_get_db():
        connection = get_connection(db_path)
        try:
            yield connection
        finally:
            connection.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
