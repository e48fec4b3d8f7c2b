import asyncio
import os
import tempfile

# The database module refuses to import without a URL, so point it at a
# throwaway SQLite file before anything from the app is imported.
_DB_DIR = tempfile.mkdtemp(prefix="hospital-report-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from database import Base
from main import app
from api.controllers.reports import get_report_repository
from services.periods import PeriodSpec, resolve_period


class FakeReportRepository:
    """In-memory stand-in for ReportRepository keyed by model table name."""

    def __init__(self, results=None, fail_on=None, delay=0):
        self.results = results or {}
        self.fail_on = fail_on
        self.delay = delay  # seconds each successful query takes
        self.calls = []
        self.cancelled = []
        self.in_flight = 0
        self.peak_in_flight = 0

    async def count_grouped(self, model, date_range, granularity):
        name = model.__tablename__
        self.calls.append((name, date_range, granularity))
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if name == self.fail_on:
                await asyncio.sleep(0)
                raise RuntimeError("connection reset by peer")
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled.append(name)
            raise
        finally:
            self.in_flight -= 1
        return dict(self.results.get(name, {}))


@pytest.fixture
def fake_repository():
    return FakeReportRepository()


@pytest.fixture
def client(fake_repository):
    app.dependency_overrides[get_report_repository] = lambda: fake_repository
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def resolve():
    def _resolve(mode, year=2025, quarter=None, month=None):
        return resolve_period(PeriodSpec(mode=mode, year=year, quarter=quarter, month=month))
    return _resolve


@pytest.fixture
def sqlite_factory(tmp_path):
    """Fresh SQLite database with all tables created; yields (engine, session factory)."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'report.db'}", poolclass=NullPool)

    async def _create():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_create())
    yield engine, async_sessionmaker(engine, expire_on_commit=False)
    asyncio.run(engine.dispose())
