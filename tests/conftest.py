"""Shared test fixtures for the tgvault test suite.

Tests run against a throwaway SQLite file by default, or against
TEST_DATABASE_URL when set (e.g. a local PostgreSQL). Tables are created
by the app on import; each test starts from empty tables.
"""

import os
import tempfile

# Point the app at the test database before any app imports.
_tmpdir = tempfile.mkdtemp(prefix="tgvault-test-")
os.environ["DATABASE_URL"] = os.environ.get(
    "TEST_DATABASE_URL",
    f"sqlite:///{os.path.join(_tmpdir, 'test.db')}",
)
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_FORMAT"] = "text"

import pytest
from fastapi.testclient import TestClient

from tgvault.database import Base, get_db, SessionLocal
from tgvault.main import app
from tgvault.core.owner_token import create_owner_token


@pytest.fixture(autouse=True)
def _clean_tables():
    """Empty every table before each test for isolation.

    Runs before the test (not after) so test failures leave data
    available for debugging.
    """
    db = SessionLocal()
    try:
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
    finally:
        db.close()
    yield


@pytest.fixture()
def db():
    """Per-test database session."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client(db):
    """FastAPI TestClient with the DB dependency overridden to use the test session."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def owner_headers(username: str) -> dict:
    """Authorization headers carrying an owner token for *username*."""
    return {"Authorization": f"Bearer {create_owner_token(username)}"}


@pytest.fixture()
def alice() -> dict:
    return owner_headers("alice")


@pytest.fixture()
def bob() -> dict:
    return owner_headers("bob")
