"""RelationshipAggregator — one relationship per pair, first venue sticks."""

import asyncio

from crosspaths.core.pair_canonicalizer import canonicalize
from crosspaths.services.relationship_aggregator import RelationshipAggregator

from tests.services.seed_data import CAFE_A, CAFE_B


async def _ensure(session_factory, pair, venue=CAFE_A):
    async with session_factory() as db:
        outcome = await RelationshipAggregator(db).ensure_relationship(
            pair, venue["name"], venue["latitude"], venue["longitude"],
        )
        await db.commit()
        return outcome


async def test_first_call_creates_active_relationship(
    test_session_factory, fetch_relationships,
):
    outcome = await _ensure(test_session_factory, canonicalize("u2", "u1"))
    assert outcome.created is True

    rows = await fetch_relationships()
    assert len(rows) == 1
    assert (rows[0].user_low_id, rows[0].user_high_id) == ("u1", "u2")
    assert rows[0].is_active is True
    assert rows[0].venue_name == "Cafe A"


async def test_repeat_calls_are_no_ops(test_session_factory, fetch_relationships):
    pair = canonicalize("u1", "u2")
    await _ensure(test_session_factory, pair)
    again = await _ensure(test_session_factory, pair)
    swapped = await _ensure(test_session_factory, canonicalize("u2", "u1"))
    assert again.created is False
    assert swapped.created is False
    assert len(await fetch_relationships()) == 1


async def test_representative_venue_is_sticky(
    test_session_factory, fetch_relationships,
):
    pair = canonicalize("u1", "u2")
    await _ensure(test_session_factory, pair, CAFE_A)
    await _ensure(test_session_factory, pair, CAFE_B)
    rows = await fetch_relationships()
    assert rows[0].venue_name == "Cafe A"
    assert rows[0].latitude == CAFE_A["latitude"]


async def test_concurrent_ensures_create_exactly_one(
    test_session_factory, fetch_relationships,
):
    pair = canonicalize("u1", "u2")
    outcomes = await asyncio.gather(
        *(_ensure(test_session_factory, pair) for _ in range(6)),
    )
    assert sum(o.created for o in outcomes) == 1
    assert len(await fetch_relationships()) == 1


async def test_distinct_pairs_get_distinct_relationships(
    test_session_factory, fetch_relationships,
):
    await _ensure(test_session_factory, canonicalize("u1", "u2"))
    await _ensure(test_session_factory, canonicalize("u1", "u3"))
    assert len(await fetch_relationships()) == 2
