"""DB service layer for runs, leaderboards and the weekly regatta.

- Routers should not touch DB sessions directly; they call this module.
- Validation happens before the store is acquired.
- Each public function holds the store for exactly one transaction.
"""

import logging
from typing import List

from uuid6 import uuid7

from booty_hunt.crud import CreateData, ReadData
from booty_hunt.db import Store
from booty_hunt.domain import validation
from booty_hunt.domain.selector import regatta_seed
from booty_hunt.domain.week_clock import next_week_start, week_key
from booty_hunt.errors import InternalError, NotFoundError, ValidationError
from booty_hunt.models.dc_models import LeaderboardCategoryModel, RunSubmissionModel
from booty_hunt.models.schema_models import (
    LeaderboardEntrySchema,
    RegattaSchema,
    RunSubmissionResultSchema,
)
from booty_hunt.models.schemas import Run
from booty_hunt.services import clock

REGATTA_TOP_RUNS = 10


async def submit_run(store: Store, submission: RunSubmissionModel) -> RunSubmissionResultSchema:
    """Persist a run and report its rank at this moment.

    The rank is 1 + the number of runs scoring strictly higher, counted right
    after the insert. It is a snapshot: nothing stores or refreshes it later.

    Args:
        store (Store): Persistent store
        submission (RunSubmissionModel): Run as submitted by the client

    Raises:
        ValidationError: Unknown ship class, negative score or a bad ghost tape

    Returns:
        RunSubmissionResultSchema: New run id and its rank
    """
    validation.validate_ship_class(submission.ship_class)
    validation.validate_score(submission.score)
    player_name = validation.normalize_player_name(submission.player_name)
    ghost_tape = validation.decode_ghost_tape(submission.ghost_tape)

    run = Run(
        id=str(uuid7()),
        seed=submission.seed,
        ship_class=submission.ship_class,
        doctrine_id=submission.doctrine_id,
        score=submission.score,
        waves=submission.waves,
        victory=submission.victory,
        ships_destroyed=submission.ships_destroyed,
        damage_dealt=submission.damage_dealt,
        max_combo=submission.max_combo,
        time_played=submission.time_played,
        max_heat=submission.max_heat,
        ghost_tape=ghost_tape,
        player_name=player_name,
        week_key=week_key(clock.utc_now()),
    )

    async with store.session() as session:
        await CreateData.create_run(run, session)
        better_runs = await ReadData.count_runs_scoring_above(run.score, session)

    rank = better_runs + 1
    logging.info(f"Run {run.id} accepted: score={run.score} rank={rank} week={run.week_key}")
    return RunSubmissionResultSchema(id=run.id, rank=rank)


async def get_leaderboard(
    store: Store,
    category: str = LeaderboardCategoryModel.global_.value,
    seed: int | None = None,
    limit: int = 20,
) -> List[LeaderboardEntrySchema]:
    """Best runs for a category.

    "weekly" keeps the current week, "seed" keeps one seed (required), and any
    other category, "global" included, applies no filter.

    Raises:
        ValidationError: Category "seed" without a seed
    """
    limit = validation.clamp_limit(limit)

    if category == LeaderboardCategoryModel.seed:
        if seed is None:
            raise ValidationError("Seed required for seed category")
        filters = {"seed": seed}
    elif category == LeaderboardCategoryModel.weekly:
        filters = {"week_key": week_key(clock.utc_now())}
    else:
        filters = {}

    async with store.session() as session:
        return await ReadData.read_leaderboard(session, limit, **filters)


async def get_ghost_tape(store: Store, run_id: str) -> bytes:
    async with store.session() as session:
        run_exists, tape = await ReadData.read_ghost_tape(run_id, session)

    if not run_exists:
        raise NotFoundError("Run not found")
    if tape is None:
        raise NotFoundError("Ghost tape not found for this run")
    return tape


async def get_or_create_regatta(store: Store) -> RegattaSchema:
    """Current week's regatta with its top runs.

    The first caller of a week inserts the derived seed if it is still absent;
    every caller then reads the stored seed back, so concurrent first-of-week
    requests all see the row that actually won.

    Returns:
        RegattaSchema: Week key, seed, end of the week and top 10 runs on that seed
    """
    now = clock.utc_now()
    current_week = week_key(now)

    async with store.session() as session:
        seed = await ReadData.read_regatta_seed(current_week, session)
        if seed is None:
            inserted = await CreateData.create_regatta_if_absent(
                current_week, regatta_seed(current_week), session
            )
            if inserted:
                logging.info(f"Regatta created for {current_week}")
            seed = await ReadData.read_regatta_seed(current_week, session)
            if seed is None:
                raise InternalError(f"Regatta seed missing for {current_week} after insert")

        top_runs = await ReadData.read_leaderboard(
            session, REGATTA_TOP_RUNS, week_key=current_week, seed=seed
        )

    return RegattaSchema(
        week_key=current_week,
        seed=seed,
        ends_at=next_week_start(now),
        top_runs=top_runs,
    )
