from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from booty_hunt.db import Store, get_store
from booty_hunt.models.dc_models import INT64_MAX, INT64_MIN, RunSubmissionModel
from booty_hunt.models.schema_models import (
    LeaderboardEntrySchema,
    RegattaSchema,
    RunSubmissionResultSchema,
)
from booty_hunt.services import run_ledger

ghost_fleet_router = APIRouter(prefix="/api")


class RunAPI:
    @staticmethod
    @ghost_fleet_router.post("/runs", response_model=RunSubmissionResultSchema)
    async def submit_run(
        submission: RunSubmissionModel,
        store: Store = Depends(get_store),
    ) -> RunSubmissionResultSchema:
        """Store a finished run and return its id and current rank

        Args:
            submission (RunSubmissionModel): Run stats, ghost tape as base64
        """
        return await run_ledger.submit_run(store, submission)

    @staticmethod
    @ghost_fleet_router.get("/ghost/{run_id}")
    async def get_ghost_tape(run_id: str, store: Store = Depends(get_store)) -> Response:
        tape = await run_ledger.get_ghost_tape(store, run_id)
        return Response(content=tape, media_type="application/octet-stream")


class LeaderboardAPI:
    @staticmethod
    @ghost_fleet_router.get("/leaderboard", response_model=List[LeaderboardEntrySchema])
    async def get_leaderboard(
        category: str = Query("global"),
        seed: Optional[int] = Query(None, ge=INT64_MIN, le=INT64_MAX),
        limit: int = Query(20),
        store: Store = Depends(get_store),
    ) -> List[LeaderboardEntrySchema]:
        """Leaderboard for "global", "weekly" or "seed" (seed required)

        Args:
            category (str): Filter to apply, unknown values behave like "global"
            seed (Optional[int]): Seed for the "seed" category
            limit (int): Clamped to 1-100
        """
        return await run_ledger.get_leaderboard(store, category, seed, limit)

    @staticmethod
    @ghost_fleet_router.get("/regatta", response_model=RegattaSchema)
    async def get_regatta(store: Store = Depends(get_store)) -> RegattaSchema:
        return await run_ledger.get_or_create_regatta(store)
