"""
Noteshelf — Test Configuration (conftest.py)
==============================================

Shared pytest fixtures.

Fixture Hierarchy (all function-scoped):
    ├── engine:           Fresh in-memory SQLite database with the schema created
    ├── session_factory:  async_sessionmaker bound to that engine
    ├── db_session:       One AsyncSession for repository tests
    ├── repo:             NoteRepository around db_session
    ├── mock_db_session:  AsyncMock session for store-failure paths
    ├── auth_headers:     Callable building Authorization headers for an owner
    └── test_client:      HTTPX AsyncClient talking to the app, wired to `engine`
"""

import os

# Must be set before anything imports noteshelf.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SESSION_SECRET"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator, Callable, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from noteshelf.auth import session_resolver
from noteshelf.database import create_tables, get_db_session
from noteshelf.services.note_repository import NoteRepository


@pytest_asyncio.fixture
async def engine():
    """
    In-memory SQLite shared by every session of one test.

    StaticPool keeps a single connection alive, otherwise each new
    connection would see a brand-new empty database.
    """
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def repo(db_session) -> NoteRepository:
    return NoteRepository(db_session)


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession; tests set `execute`/`flush` side effects on it.

    Usage:
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception())
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def auth_headers() -> Callable[[str], Dict[str, str]]:
    def _headers(owner_id: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {session_resolver.issue(owner_id)}"}
    return _headers


@pytest.fixture
def sample_note_data():
    return {
        "title": "A",
        "content": "<p>x</p>",
        "tags": ["work"],
    }


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    `get_db_session` is overridden with the same commit/rollback contract
    but bound to the per-test engine.
    """
    from noteshelf.main import app

    async def _override_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
