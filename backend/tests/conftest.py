"""Shared fixtures: in-memory database, fake health checker, API client."""

import itertools
import os
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

# Must be set before app.config is first imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SEED_DATA", "false")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.session import build_engine, build_sessionmaker, create_tables, get_session
from app.main import create_app
from app.services.health_checker import HealthCheckResult, ProbeOutcome


def ticking_clock(start: datetime | None = None) -> Callable[[], datetime]:
    """A clock that moves forward one second on every call."""
    start = start or datetime(2026, 1, 1, tzinfo=UTC)
    ticks = itertools.count()
    return lambda: start + timedelta(seconds=next(ticks))


def make_result(**overrides) -> HealthCheckResult:
    """Build a healthy 200 result, overriding any field."""
    values = {
        "outcome": ProbeOutcome.RESPONSE,
        "is_healthy": True,
        "status_code": 200,
        "response_time_ms": 42,
        "checked_at": datetime.now(UTC),
    }
    values.update(overrides)
    return HealthCheckResult(**values)


class FakeHealthChecker:
    """Returns queued results in order, repeating the last one."""

    def __init__(self, *results: HealthCheckResult):
        self.results = list(results) or [make_result()]
        self.calls: list[str] = []

    async def check_health(self, url: str, timeout: float | None = None) -> HealthCheckResult:
        self.calls.append(url)
        if len(self.results) > 1:
            return self.results.pop(0)
        return self.results[0]

    async def close(self) -> None:
        pass


@pytest.fixture()
async def engine():
    engine = build_engine("sqlite+aiosqlite://")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return build_sessionmaker(engine)


@pytest.fixture()
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def fake_checker() -> FakeHealthChecker:
    return FakeHealthChecker()


@pytest.fixture()
async def client(session_factory, fake_checker):
    """API client on an isolated in-memory database and a fake checker."""
    app = create_app()

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.state.health_checker = fake_checker

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
