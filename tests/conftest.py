from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from libs.db.base import Base
from libs.db.session import get_async_db
from services.pos_service import models as _pos_models  # noqa: F401
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """
    A fresh SQLite file database per test.

    A file (rather than :memory:) lets several connections see the same data,
    which the concurrent-order tests rely on.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'pos.db'}",
        future=True,
        connect_args={"timeout": 30},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        # SQLite ignores ON DELETE rules unless asked
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return async_sessionmaker(
        bind=test_engine, class_=AsyncSession, expire_on_commit=False
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    session = session_factory()
    try:
        yield session
    finally:
        await session.close()


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient for the POS app; every request gets its own session
    on the test database.
    """
    from services.pos_service.app.main import app

    async def _get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = _get_test_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
