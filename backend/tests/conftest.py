"""
ChoreoNotes Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the whole suite.
How:   Every test gets its own temporary SQLite file (aiosqlite, foreign keys
       on), so cascades and unique constraints behave like PostgreSQL's.

Fixture Hierarchy (all function-scoped):
    database ─┬─ db_session ── make_user      (service-level tests)
              └─ test_client ── register      (HTTP-level tests)
    mock_db_session                           (pure unit tests, no database)
"""

import os

# Must run before any choreonotes import: `settings` is read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["JWT_SECRET"] = "test-secret-for-choreonotes-suite-0123456789"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from itertools import count
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from choreonotes.database import Database
from choreonotes.models.user import User

_user_seq = count(1)


@pytest_asyncio.fixture
async def database(tmp_path):
    """A fresh schema in a throwaway SQLite file."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'choreo_test.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest.fixture
def make_user(db_session):
    """
    Insert a user directly (no bcrypt, no HTTP).

    Usage:
        dancer = await make_user()
        other = await make_user(email="other@example.com")
    """
    async def _make_user(email=None, username=None):
        n = next(_user_seq)
        user = User(
            email=email or f"dancer{n}@example.com",
            password_hash="not-a-real-hash",
            username=username or f"dancer{n}",
        )
        db_session.add(user)
        await db_session.flush()
        return user

    return _make_user


@pytest.fixture
def mock_db_session():
    """A MagicMock standing in for AsyncSession in pure unit tests."""
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def test_client(database):
    """
    HTTPX AsyncClient talking to a fresh app bound to the test database.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from choreonotes.main import create_app

    app = create_app(database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def register(test_client):
    """
    Register a user through the API and return (user_json, auth_headers).

    Usage:
        user, headers = await register("alice@example.com")
    """
    async def _register(email, password="secret123", username=None):
        response = await test_client.post(
            "/api/auth/register",
            json={
                "email": email,
                "password": password,
                "username": username or email.split("@")[0] + "-dancer",
            },
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"], {"Authorization": f"Bearer {body['token']}"}

    return _register
