"""Engine and session handling for the page link store.

The database comes from DATABASE_URL: PostgreSQL through asyncpg by default,
SQLite through aiosqlite for local runs and tests.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from app.config import get_settings


def engine_options(database_url: str) -> dict[str, Any]:
    """Extra create_async_engine() arguments needed by the given backend."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return {}
    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if url.database in (None, "", ":memory:"):
        # An in-memory database lives as long as its connection, so share one
        options["poolclass"] = StaticPool
    return options


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    return create_async_engine(database_url, echo=echo, **engine_options(database_url))


def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Links stay readable after commit, e.g. when serialised by the API
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


settings = get_settings()
engine = build_engine(settings.database_url, echo=settings.debug)
async_session = build_sessionmaker(engine)


async def create_tables(bind: AsyncEngine) -> None:
    # Registers the table models on SQLModel.metadata
    import app.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def init_db() -> None:
    """Create the tables on the configured database."""
    await create_tables(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    async with async_session() as session:
        yield session
