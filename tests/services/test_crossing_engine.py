"""CrossingEngine — end-to-end crossing behaviour over a real (SQLite) database.

Invariants:
    - First visitor to a venue crosses nobody
    - A later visitor crosses every earlier visitor: count=1 and a new relationship
    - Repeat co-location increments the count and leaves the relationship alone
    - Different pairs at different venues get separate counters and relationships
    - Racing visits by two users to a fresh venue end at exactly one row with count=1
"""

import asyncio

from crosspaths.core.domain_types import CrossingState


async def test_first_visit_crosses_nobody(visit, fetch_counts, fetch_relationships):
    result = await visit("U1", "cafe-a")
    assert result.visit.user_id == "U1"
    assert result.visitors_processed == 0
    assert result.crossings_created == 0
    assert result.failures == ()
    assert await fetch_counts() == []
    assert await fetch_relationships() == []


async def test_second_visitor_creates_crossing_and_relationship(
    visit, fetch_counts, fetch_relationships,
):
    await visit("U1", "cafe-a")
    result = await visit("U2", "cafe-a", minutes=30)

    assert result.visitors_processed == 1
    assert result.crossings_created == 1
    assert result.relationships_created == 1
    outcome = result.outcomes[0]
    assert outcome.other_user_id == "U1"
    assert tuple(outcome.pair) == ("U1", "U2")
    assert outcome.state is CrossingState.FIRST_CROSSING

    counts = await fetch_counts()
    assert len(counts) == 1
    assert counts[0].crossing_count == 1
    relationships = await fetch_relationships()
    assert len(relationships) == 1
    assert relationships[0].venue_name == "Cafe A"
    assert relationships[0].is_active is True


async def test_repeat_visit_increments_without_new_relationship(
    visit, fetch_counts, fetch_relationships,
):
    await visit("U1", "cafe-a")
    await visit("U2", "cafe-a", minutes=30)
    result = await visit("U1", "cafe-a", minutes=60)

    assert result.crossings_created == 0
    assert result.relationships_created == 0
    assert result.outcomes[0].count == 2
    assert result.outcomes[0].state is CrossingState.REPEAT_CROSSING

    counts = await fetch_counts()
    assert len(counts) == 1
    assert counts[0].crossing_count == 2
    assert len(await fetch_relationships()) == 1


async def test_different_venue_and_pair_are_independent(
    visit, fetch_counts, fetch_relationships,
):
    await visit("U1", "cafe-a")
    await visit("U2", "cafe-a", minutes=30)
    await visit("U1", "cafe-b", minutes=60)
    result = await visit("U3", "cafe-b", minutes=90)

    assert [o.other_user_id for o in result.outcomes] == ["U1"]
    assert result.relationships_created == 1

    counts = {(c.user_low_id, c.user_high_id, c.venue_id): c.crossing_count
              for c in await fetch_counts()}
    assert counts == {("U1", "U2", "cafe-a"): 1, ("U1", "U3", "cafe-b"): 1}
    pairs = {(r.user_low_id, r.user_high_id): r.venue_name
             for r in await fetch_relationships()}
    assert pairs == {("U1", "U2"): "Cafe A", ("U1", "U3"): "Cafe B"}


async def test_relationship_keeps_first_venue_when_pair_meets_elsewhere(
    visit, fetch_counts, fetch_relationships,
):
    await visit("U1", "cafe-a")
    await visit("U2", "cafe-a", minutes=10)
    await visit("U1", "cafe-b", minutes=20)
    result = await visit("U2", "cafe-b", minutes=30)

    # new venue → new counter row, but the pair already has its relationship
    assert result.crossings_created == 1
    assert result.relationships_created == 0
    assert len(await fetch_counts()) == 2
    relationships = await fetch_relationships()
    assert len(relationships) == 1
    assert relationships[0].venue_name == "Cafe A"


async def test_visit_fans_out_to_every_prior_visitor(visit, fetch_counts):
    for i, user in enumerate(["U1", "U2", "U3", "U4", "U5", "U6"]):
        await visit(user, "cafe-a", minutes=i)
    result = await visit("U7", "cafe-a", minutes=10)

    assert result.visitors_processed == 6
    assert result.crossings_created == 6
    assert sorted(o.other_user_id for o in result.outcomes) == [
        "U1", "U2", "U3", "U4", "U5", "U6",
    ]
    # 5 + 4 + 3 + 2 + 1 earlier crossings, plus 6 from U7
    assert len(await fetch_counts()) == 21


async def test_repeat_visitor_counted_once_per_visit(visit, fetch_counts):
    await visit("U1", "cafe-a", minutes=0)
    await visit("U1", "cafe-a", minutes=5)
    await visit("U1", "cafe-a", minutes=10)
    result = await visit("U2", "cafe-a", minutes=15)

    assert result.visitors_processed == 1
    counts = await fetch_counts()
    assert counts[0].crossing_count == 1


async def test_concurrent_visits_to_fresh_venue_cross_once(
    visit, fetch_counts, fetch_relationships,
):
    results = await asyncio.gather(
        visit("U4", "cafe-a"), visit("U5", "cafe-a"),
    )

    assert sum(r.crossings_created for r in results) == 1
    counts = await fetch_counts()
    assert len(counts) == 1
    assert (counts[0].user_low_id, counts[0].user_high_id) == ("U4", "U5")
    assert counts[0].crossing_count == 1
    assert len(await fetch_relationships()) == 1


async def test_many_concurrent_visits_keep_one_row_per_pair(visit, fetch_counts):
    users = [f"U{i:02d}" for i in range(8)]
    await asyncio.gather(*(visit(u, "cafe-a") for u in users))

    counts = await fetch_counts()
    keys = [(c.user_low_id, c.user_high_id) for c in counts]
    assert len(keys) == len(set(keys))
    assert all(c.crossing_count == 1 for c in counts)
    # every pair crossed exactly once: the later-recorded visit saw the earlier one
    assert len(counts) == len(users) * (len(users) - 1) // 2
