import asyncio
import base64

import pytest

from booty_hunt.domain.selector import regatta_seed
from booty_hunt.domain.week_clock import week_key
from booty_hunt.errors import NotFoundError, ValidationError
from booty_hunt.models.schemas import Regatta, Run
from booty_hunt.services import run_ledger
from conftest import FROZEN_NOW, count_rows, make_run


async def test_first_run_ranks_first_and_shows_on_global_board(store):
    result = await run_ledger.submit_run(store, make_run(seed=12345, score=5000, player_name="Test Player"))
    assert result.rank == 1
    assert result.id

    entries = await run_ledger.get_leaderboard(store, "global")
    assert len(entries) == 1
    assert entries[0].score == 5000
    assert entries[0].player_name == "Test Player"
    assert entries[0].id == result.id


async def test_increasing_scores_each_take_first_place(store):
    for score in (100, 200, 300, 400):
        result = await run_ledger.submit_run(store, make_run(score=score))
        assert result.rank == 1


async def test_rank_counts_strictly_better_runs(store):
    ranks = [(await run_ledger.submit_run(store, make_run(score=score))).rank for score in (300, 200, 100)]
    assert ranks == [1, 2, 3]


async def test_ties_share_the_higher_rank(store):
    first = await run_ledger.submit_run(store, make_run(score=100))
    tied = await run_ledger.submit_run(store, make_run(score=100))
    lower = await run_ledger.submit_run(store, make_run(score=50))
    assert (first.rank, tied.rank, lower.rank) == (1, 1, 3)


async def test_rank_is_a_snapshot(store):
    early = await run_ledger.submit_run(store, make_run(score=100))
    await run_ledger.submit_run(store, make_run(score=900))

    entries = await run_ledger.get_leaderboard(store)
    assert [entry.score for entry in entries] == [900, 100]
    assert early.rank == 1


async def test_unknown_ship_class_is_rejected_without_writing(store):
    with pytest.raises(ValidationError):
        await run_ledger.submit_run(store, make_run(ship_class="submarine"))
    assert await count_rows(store, Run) == 0


async def test_negative_score_is_rejected(store):
    with pytest.raises(ValidationError):
        await run_ledger.submit_run(store, make_run(score=-1))
    assert await count_rows(store, Run) == 0


async def test_blank_player_name_defaults_to_anonymous(store):
    await run_ledger.submit_run(store, make_run(player_name="   "))
    entries = await run_ledger.get_leaderboard(store)
    assert entries[0].player_name == "Anonymous"


async def test_ghost_tape_round_trip(store):
    tape = b"\x00\x01ghost\xff" * 10
    result = await run_ledger.submit_run(store, make_run(ghost_tape=base64.b64encode(tape).decode()))
    assert await run_ledger.get_ghost_tape(store, result.id) == tape


async def test_ghost_tape_at_limit_is_stored(store):
    tape = bytes(512 * 1024)
    result = await run_ledger.submit_run(store, make_run(ghost_tape=base64.b64encode(tape).decode()))
    assert len(await run_ledger.get_ghost_tape(store, result.id)) == 512 * 1024


async def test_oversized_ghost_tape_is_rejected_without_writing(store):
    tape = bytes(512 * 1024 + 1)
    with pytest.raises(ValidationError):
        await run_ledger.submit_run(store, make_run(ghost_tape=base64.b64encode(tape).decode()))
    assert await count_rows(store, Run) == 0


async def test_ghost_tape_missing_for_run_without_tape(store):
    result = await run_ledger.submit_run(store, make_run())
    with pytest.raises(NotFoundError, match="Ghost tape not found"):
        await run_ledger.get_ghost_tape(store, result.id)


async def test_ghost_tape_missing_for_unknown_run(store):
    with pytest.raises(NotFoundError, match="Run not found"):
        await run_ledger.get_ghost_tape(store, "no-such-run")


async def test_leaderboard_is_sorted_and_limit_is_clamped(store):
    for score in (10, 30, 20):
        await run_ledger.submit_run(store, make_run(score=score))

    entries = await run_ledger.get_leaderboard(store, "global", limit=1000)
    assert [entry.score for entry in entries] == [30, 20, 10]

    entries = await run_ledger.get_leaderboard(store, "global", limit=0)
    assert [entry.score for entry in entries] == [30]


async def test_seed_category_requires_a_seed(store):
    with pytest.raises(ValidationError):
        await run_ledger.get_leaderboard(store, "seed")


async def test_seed_category_filters_by_seed(store):
    await run_ledger.submit_run(store, make_run(seed=1, score=100))
    await run_ledger.submit_run(store, make_run(seed=2, score=200))

    entries = await run_ledger.get_leaderboard(store, "seed", seed=1)
    assert [entry.score for entry in entries] == [100]


async def test_weekly_category_keeps_only_the_current_week(store, frozen_clock):
    await run_ledger.submit_run(store, make_run(score=900))
    frozen_clock.advance(days=7)
    await run_ledger.submit_run(store, make_run(score=100))

    weekly = await run_ledger.get_leaderboard(store, "weekly")
    assert [entry.score for entry in weekly] == [100]


async def test_unknown_category_behaves_like_global(store):
    await run_ledger.submit_run(store, make_run(seed=1, score=100))
    await run_ledger.submit_run(store, make_run(seed=2, score=200))

    entries = await run_ledger.get_leaderboard(store, "whatever", seed=1)
    assert [entry.score for entry in entries] == [200, 100]


async def test_regatta_seed_is_stable_within_the_week(store, frozen_clock):
    first = await run_ledger.get_or_create_regatta(store)
    frozen_clock.advance(days=3)
    second = await run_ledger.get_or_create_regatta(store)

    assert first.week_key == second.week_key == week_key(FROZEN_NOW)
    assert first.seed == second.seed == regatta_seed(first.week_key)
    assert first.ends_at.isoformat() == "2026-10-26T00:00:00+00:00"


async def test_regatta_rotates_with_the_week(store, frozen_clock):
    first = await run_ledger.get_or_create_regatta(store)
    frozen_clock.advance(days=7)
    second = await run_ledger.get_or_create_regatta(store)

    assert second.week_key != first.week_key
    assert second.seed == regatta_seed(second.week_key)
    assert await count_rows(store, Regatta) == 2


async def test_regatta_top_runs_match_seed_and_week(store, frozen_clock):
    regatta = await run_ledger.get_or_create_regatta(store)
    for score in range(100, 1300, 100):
        await run_ledger.submit_run(store, make_run(seed=regatta.seed, score=score))
    await run_ledger.submit_run(store, make_run(seed=regatta.seed + 1, score=99999))

    regatta = await run_ledger.get_or_create_regatta(store)
    scores = [run.score for run in regatta.top_runs]
    assert scores == list(range(1200, 200, -100))

    frozen_clock.advance(days=7)
    assert (await run_ledger.get_or_create_regatta(store)).top_runs == []


async def test_stored_regatta_seed_wins_over_derived_seed(store):
    async with store.session() as session:
        session.add(Regatta(week_key=week_key(FROZEN_NOW), seed=42))

    regatta = await run_ledger.get_or_create_regatta(store)
    assert regatta.seed == 42


async def test_concurrent_first_of_week_requests_converge(store):
    results = await asyncio.gather(*(run_ledger.get_or_create_regatta(store) for _ in range(10)))

    assert {result.seed for result in results} == {regatta_seed(week_key(FROZEN_NOW))}
    assert await count_rows(store, Regatta) == 1
