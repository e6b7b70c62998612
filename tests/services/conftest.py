"""Service test fixtures — file-backed SQLite database, engine, and FastAPI test client.

Invariants:
    - Every test gets a fresh SQLite database file under tmp_path
    - Foreign keys are enforced (visits.venue_id → venues.id)
    - db_manager is replaced so the crossing engine and routes share the test database
    - Venues "Cafe A" and "Cafe B" are registered before each test that asks for them

Design Decisions:
    - File-backed SQLite, not :memory: each session gets its own connection, so
      concurrent pair tasks really run in separate transactions
"""

from datetime import timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select

import crosspaths.infrastructure.database as db_module
import crosspaths.models  # noqa: F401
from crosspaths.db.base import Base
from crosspaths.db.session import create_engine_for, create_session_factory
from crosspaths.infrastructure.database import DatabaseSessionManager, get_db
from crosspaths.main import app
from crosspaths.models.crossed_path import CrossedPathRelationship
from crosspaths.models.crossing_count import CrossingCount
from crosspaths.models.venue import Venue
from crosspaths.services.crossing_engine import CrossingEngine

from tests.services.seed_data import BASE_TIME, CAFE_A, CAFE_B


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'crosspaths.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return create_session_factory(test_engine)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def db_manager(test_engine, test_session_factory):
    """DatabaseSessionManager bound to the test database."""
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
async def venues(test_db):
    test_db.add_all([Venue(**CAFE_A), Venue(**CAFE_B)])
    await test_db.commit()
    return {"cafe-a": CAFE_A, "cafe-b": CAFE_B}


@pytest.fixture
def crossing_engine(db_manager):
    return CrossingEngine(db_manager.session, max_concurrency=4)


@pytest.fixture
def visit(crossing_engine, venues):
    """Record a visit by user_id at a seeded venue; minutes offsets BASE_TIME."""
    async def _visit(user_id, venue_id="cafe-a", minutes=0, engine=None):
        v = venues[venue_id]
        return await (engine or crossing_engine).record_visit(
            user_id, v["id"], v["name"], v["latitude"], v["longitude"],
            BASE_TIME + timedelta(minutes=minutes),
        )
    return _visit


@pytest.fixture
def fetch_counts(test_session_factory):
    async def _fetch():
        async with test_session_factory() as db:
            result = await db.execute(select(CrossingCount))
            return list(result.scalars().all())
    return _fetch


@pytest.fixture
def fetch_relationships(test_session_factory):
    async def _fetch():
        async with test_session_factory() as db:
            result = await db.execute(select(CrossedPathRelationship))
            return list(result.scalars().all())
    return _fetch


@pytest.fixture
async def client(test_session_factory, db_manager):
    """FastAPI test client with DB dependency and db_manager overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    original_manager = db_module.db_manager
    db_module.db_manager = db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
