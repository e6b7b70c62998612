"""Dialect Inserts — INSERT constructs that support ON CONFLICT for the bound database.

Invariants:
    - Only PostgreSQL and SQLite are supported; anything else raises UnsupportedDialectError
    - The returned construct exposes on_conflict_do_update / on_conflict_do_nothing

Design Decisions:
    - Dispatch on the session's bind at call time: one code path serves asyncpg in
      production and aiosqlite in tests
"""

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from crosspaths.core.errors import UnsupportedDialectError

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def dialect_insert(db: AsyncSession, entity):
    """Build a conflict-aware INSERT for entity against db's dialect."""
    dialect = db.get_bind().dialect.name
    insert_fn = _INSERT_BY_DIALECT.get(dialect)
    if insert_fn is None:
        raise UnsupportedDialectError(dialect)
    return insert_fn(entity)
