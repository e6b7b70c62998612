"""Database Package — declarative Base and standalone session factories.

Invariants:
    - All sessions are async (AsyncSession)
    - asyncpg driver for PostgreSQL, aiosqlite for tests
"""
