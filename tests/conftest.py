from collections.abc import Awaitable, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cardmarket.db.cards import create_card
from cardmarket.db.database import get_session
from cardmarket.db.users import create_user
from cardmarket.main import app
from cardmarket.models.card import CardCreate
from cardmarket.models.db import Base, CardDB, UserDB


def _enable_foreign_keys(dbapi_connection, _connection_record) -> None:
    # SQLite ignores ON DELETE rules unless foreign keys are enabled per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session(async_engine) -> AsyncSession:
    """Provide a database session for tests."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
async def client(async_engine):
    """Provide an async test client with overridden database session."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session: AsyncSession) -> Callable[[str], Awaitable[UserDB]]:
    """Factory that creates and commits a user."""

    async def _make_user(username: str) -> UserDB:
        user = await create_user(session, username)
        await session.commit()
        return user

    return _make_user


@pytest.fixture
def make_card(session: AsyncSession) -> Callable[..., Awaitable[CardDB]]:
    """Factory that creates and commits a card with sensible defaults."""

    async def _make_card(
        name: str,
        archetype: str | None = None,
        type: str = "Effect Monster",
        race: str = "Warrior",
    ) -> CardDB:
        card = await create_card(
            session,
            CardCreate(
                name=name,
                type=type,
                race=race,
                archetype=archetype,
                image=f"/assets/{name.lower().replace(' ', '-')}.jpg",
            ),
        )
        await session.commit()
        return card

    return _make_card
