"""CrossingCounter — atomic insert-or-increment per (pair, venue).

Invariants:
    - First call inserts at 1 with is_new=True; each later call adds exactly 1
    - One row per (pair, venue) regardless of which member triggered the call
    - Concurrent callers on a fresh key never lose an increment or duplicate a row
"""

import asyncio
from types import SimpleNamespace

import pytest

from crosspaths.core.errors import UnsupportedDialectError
from crosspaths.core.pair_canonicalizer import canonicalize
from crosspaths.infrastructure.upsert import dialect_insert
from crosspaths.models.crossing_count import CrossingCount
from crosspaths.services.crossing_counter import CrossingCounter

from tests.services.seed_data import CAFE_A, CAFE_B


async def _count(session_factory, pair, venue=CAFE_A):
    async with session_factory() as db:
        outcome = await CrossingCounter(db).record_crossing(
            pair, venue["id"], venue["name"], venue["latitude"], venue["longitude"],
        )
        await db.commit()
        return outcome


async def test_first_crossing_inserts_at_one(test_session_factory, fetch_counts):
    outcome = await _count(test_session_factory, canonicalize("u1", "u2"))
    assert outcome.is_new is True
    assert outcome.count == 1

    rows = await fetch_counts()
    assert len(rows) == 1
    assert (rows[0].user_low_id, rows[0].user_high_id) == ("u1", "u2")
    assert rows[0].venue_name == "Cafe A"
    assert rows[0].crossing_count == 1


async def test_n_calls_yield_count_n(test_session_factory, fetch_counts):
    pair = canonicalize("u1", "u2")
    outcomes = [await _count(test_session_factory, pair) for _ in range(5)]
    assert [o.count for o in outcomes] == [1, 2, 3, 4, 5]
    assert [o.is_new for o in outcomes] == [True, False, False, False, False]
    rows = await fetch_counts()
    assert len(rows) == 1
    assert rows[0].crossing_count == 5


async def test_either_member_increments_same_row(test_session_factory, fetch_counts):
    await _count(test_session_factory, canonicalize("u1", "u2"))
    await _count(test_session_factory, canonicalize("u2", "u1"))
    rows = await fetch_counts()
    assert len(rows) == 1
    assert rows[0].crossing_count == 2


async def test_update_refreshes_updated_at(test_session_factory, fetch_counts):
    pair = canonicalize("u1", "u2")
    await _count(test_session_factory, pair)
    first = (await fetch_counts())[0]
    await asyncio.sleep(0.01)
    await _count(test_session_factory, pair)
    second = (await fetch_counts())[0]
    assert second.updated_at > first.updated_at
    assert second.created_at == first.created_at


async def test_venues_are_counted_separately(test_session_factory, fetch_counts):
    pair = canonicalize("u1", "u2")
    await _count(test_session_factory, pair, CAFE_A)
    outcome = await _count(test_session_factory, pair, CAFE_B)
    assert outcome.is_new is True
    rows = await fetch_counts()
    assert sorted(r.venue_id for r in rows) == ["cafe-a", "cafe-b"]


async def test_concurrent_increments_are_not_lost(test_session_factory, fetch_counts):
    pair = canonicalize("u4", "u5")
    outcomes = await asyncio.gather(
        *(_count(test_session_factory, pair) for _ in range(10)),
    )
    assert sorted(o.count for o in outcomes) == list(range(1, 11))
    assert sum(o.is_new for o in outcomes) == 1
    rows = await fetch_counts()
    assert len(rows) == 1
    assert rows[0].crossing_count == 10


def test_unsupported_dialect_is_rejected():
    fake_db = SimpleNamespace(
        get_bind=lambda: SimpleNamespace(dialect=SimpleNamespace(name="mysql")),
    )
    with pytest.raises(UnsupportedDialectError) as exc_info:
        dialect_insert(fake_db, CrossingCount)
    assert exc_info.value.dialect == "mysql"
