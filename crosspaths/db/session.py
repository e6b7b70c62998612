"""Async Session Factory — DB sessions for scripts and test fixtures outside FastAPI.

Invariants:
    - Same engine options as DatabaseSessionManager (SQLite gets foreign keys on)
    - Caller owns the returned engine and must dispose it

Design Decisions:
    - Separate from infrastructure/database.py: no singleton, no error mapping
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)

from crosspaths.infrastructure.database import enable_sqlite_foreign_keys


def create_engine_for(database_url: str) -> AsyncEngine:
    engine = create_async_engine(database_url, echo=False)
    if database_url.startswith("sqlite"):
        enable_sqlite_foreign_keys(engine)
    return engine


def create_session_factory(
    engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to engine."""
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
