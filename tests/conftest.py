"""
Pytest configuration and fixtures
"""

import pytest
import pytest_asyncio
import httpx
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession
from core.database import create_engine, create_session_maker
from telemetry import record as record_module
from telemetry.record import HostContext
from telemetry.store import ensure_etl_logs_table


@pytest.fixture
def mock_transport():
    """
    Build an httpx.MockTransport from a route table.

    Routes map (METHOD, path) to either a (status, response kwargs) tuple
    or a callable taking the request and returning an httpx.Response.
    Unknown routes answer 404. Every request seen is kept on
    ``transport.calls``.
    """
    def _make(routes):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            route = routes.get((request.method, request.url.path))
            if route is None:
                return httpx.Response(404, text="not found")
            if callable(route):
                return route(request)
            status, kwargs = route
            return httpx.Response(status, **kwargs)

        transport = httpx.MockTransport(handler)
        transport.calls = calls
        return transport

    return _make


@pytest.fixture
def host_context():
    return HostContext(hostname="test-host", process_id=4242)


class FakeClock:
    """Controllable replacement for the execution record clock"""

    def __init__(self):
        self.now = datetime(2025, 12, 21, 10, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock()
    monkeypatch.setattr(record_module, "_utcnow", fake)
    return fake


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    """Create test database engine backed by a temporary SQLite file"""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'etl_logs.db'}")
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session with the etl_logs table in place"""
    await ensure_etl_logs_table(test_engine)

    async with create_session_maker(test_engine)() as session:
        yield session
        await session.rollback()


@pytest.fixture
def mock_api_data():
    """Mock API response data"""
    return {
        "count": 2,
        "results": [
            {"id": 1, "title": "Launch scheduled", "updated_at": "2025-12-21T10:00:00Z"},
            {"id": 2, "title": "Booster recovered", "updated_at": "2025-12-21T11:00:00Z"}
        ]
    }
