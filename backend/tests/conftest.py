"""
Grievance Portal Backend — Test Configuration (conftest.py)
============================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets a fresh in-memory SQLite database (aiosqlite) with all
       tables created from the ORM metadata. HTTP tests talk to the FastAPI
       app through httpx's ASGITransport with `get_db_session` overridden to
       use that database.

Fixture Hierarchy:
    test_engine ── session_factory ──┬── db_session      (service tests)
                                     ├── owner / intruder (committed users)
                                     ├── make_person / make_message
                                     └── client / owner_client / intruder_client

Tests never keep a session open across an HTTP call: with a single shared
in-memory connection, one session's rollback-on-return would discard the
other's uncommitted work. Factories commit and close before returning.
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SESSION_SECRET"] = "test-session-secret-0123456789abcdef"
os.environ["PUBLIC_BASE_URL"] = "https://grievances.test"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.auth.session import create_session_token
from app.database import Base, get_db_session
from app.models.message import Message
from app.models.person import Person
from app.models.user import User
from app.services.person_service import generate_slug


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_engine():
    """A private in-memory database per test, tables already created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    A session for service-level tests.

    Usage:
        async def test_list(db_session, owner):
            result = await person_service.list_persons(db_session, owner_session)
    """
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Data Factories
# ══════════════════════════════════════════════════════════════════════════

async def _add(session_factory, record):
    async with session_factory() as session:
        session.add(record)
        await session.commit()
    return record


@pytest_asyncio.fixture
async def owner(session_factory) -> User:
    return await _add(session_factory, User(username="jane", name="Jane"))


@pytest_asyncio.fixture
async def intruder(session_factory) -> User:
    return await _add(session_factory, User(username="mallory", name="Mallory"))


@pytest.fixture
def make_person(session_factory):
    """
    Insert a committed Person.

    Usage:
        person = await make_person(owner, "Jane Doe")
    """

    async def _make(user: User, name: str = "Jane Doe", slug: Optional[str] = None) -> Person:
        return await _add(
            session_factory,
            Person(name=name, slug=slug or generate_slug(name), user_id=user.id),
        )

    return _make


@pytest.fixture
def make_message(session_factory):
    async def _make(
        person: Person,
        content: str = "Ate my lunch",
        emoji: str = "angry",
        expected_response: Optional[str] = None,
        done: bool = False,
    ) -> Message:
        return await _add(
            session_factory,
            Message(
                content=content,
                emoji=emoji,
                expected_response=expected_response,
                done=done,
                person_id=person.id,
            ),
        )

    return _make


@pytest.fixture
def fetch(session_factory):
    """Read a row back in a fresh session: `await fetch(Message, message_id)`."""

    async def _fetch(model, pk):
        async with session_factory() as session:
            return await session.get(model, pk)

    return _fetch


def session_token(user: User) -> str:
    return create_session_token(str(user.id), user.username, user.name)


@pytest.fixture
def token_for():
    """Mint a valid session token for a user: `token_for(owner)`."""
    return session_token


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def api_app(session_factory):
    """The FastAPI app with its DB dependency pointed at the test database."""
    from app.main import app

    async def _override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _override_db_session
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(api_app):
    """
    Anonymous HTTP client.

    Usage:
        async def test_share(client):
            response = await client.get("/share/unknown")
            assert response.status_code == 404
    """
    transport = ASGITransport(app=api_app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def owner_client(api_app, owner):
    """Client authenticated as `owner` through the Bearer header."""
    transport = ASGITransport(app=api_app)
    headers = {"Authorization": f"Bearer {session_token(owner)}"}
    async with AsyncClient(transport=transport, base_url="http://test", headers=headers) as c:
        yield c


@pytest_asyncio.fixture
async def intruder_client(api_app, intruder):
    """Client authenticated as `intruder` through the session cookie."""
    transport = ASGITransport(app=api_app)
    cookies = {"session-token": session_token(intruder)}
    async with AsyncClient(transport=transport, base_url="http://test", cookies=cookies) as c:
        yield c
