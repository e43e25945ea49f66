"""Shared test fixtures for the yzdice test suite.

db_engine  (function scope)
    In-memory SQLite with the schema created and the dev users (Alice, Bob,
    Gamemaster) seeded. StaticPool keeps every connection on the same database.

client  (function scope)
    AsyncClient wired to the FastAPI app, with get_db pointed at db_engine and
    a fresh open-roll table per test.

db  (function scope)
    An AsyncSession on db_engine, for asserting what requests wrote or for
    calling the chat service directly.

Engine and parser tests need no fixture; helpers.FixedRandom gives them
scripted dice.
"""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from yzdice.database import Base, get_db
from yzdice.dependencies import get_roll_table
from yzdice.main import _DEV_USERS, app
from yzdice.models import User
from yzdice.rolls import RollTable


@pytest.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as setup:
        for name, is_gm in _DEV_USERS:
            setup.add(User(display_name=name, is_gm=is_gm))
        await setup.commit()

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
def roll_table() -> RollTable:
    return RollTable(capacity=10)


@pytest.fixture
async def client(session_factory, roll_table):
    """AsyncClient wired to the app with an isolated database and roll table."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_roll_table] = lambda: roll_table

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_roll_table, None)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session

