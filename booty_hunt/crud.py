"""Statement helpers for the five logical tables.

Every helper runs inside a session opened by the caller (see services/), so a
service can chain several helpers under one exclusive store acquisition. None of
them commit.
"""

import logging
from datetime import datetime
from typing import List

from sqlalchemy import desc, func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from booty_hunt.models.schemas import Regatta, Run, SignalFire, TideContribution, TideOmen
from booty_hunt.models.schema_models import LeaderboardEntrySchema


def _insert_if_absent(session: AsyncSession, table):
    """INSERT ... ON CONFLICT DO NOTHING for the bound dialect."""
    if session.bind.dialect.name == "postgresql":
        return postgresql.insert(table).on_conflict_do_nothing()
    return sqlite.insert(table).on_conflict_do_nothing()


class CreateData:
    @staticmethod
    async def create_run(run: Run, session: AsyncSession) -> None:
        """Add a run and flush it so later statements in the session see it

        Args:
            run (Run): Fully populated run row
        """
        try:
            session.add(run)
            await session.flush()
        except SQLAlchemyError as e:
            logging.error(f"Failed to create run data: {e}")
            raise

    @staticmethod
    async def create_regatta_if_absent(week_key: str, seed: int, session: AsyncSession) -> bool:
        """Insert the week's regatta seed unless another caller already did

        Args:
            week_key (str): ISO week key
            seed (int): Seed derived for this week

        Returns:
            bool: True when this call inserted the row
        """
        stmt = _insert_if_absent(session, Regatta).values(week_key=week_key, seed=seed)
        result = await session.execute(stmt)
        return result.rowcount == 1

    @staticmethod
    async def create_signal_fire_if_absent(
        code: str,
        creator_run: str,
        aid_type: str,
        aid_amount: int,
        heat_cost: float,
        expires_at: datetime,
        session: AsyncSession,
    ) -> bool:
        """Insert an active signal fire unless the code is already taken

        Returns:
            bool: False on a code collision
        """
        stmt = _insert_if_absent(session, SignalFire).values(
            code=code,
            creator_run=creator_run,
            aid_type=aid_type,
            aid_amount=aid_amount,
            heat_cost=heat_cost,
            redeemed=False,
            expires_at=expires_at,
        )
        result = await session.execute(stmt)
        return result.rowcount == 1

    @staticmethod
    async def create_tide_omen_if_absent(
        week_key: str, omen_id: str, omen_name: str, modifiers: dict, session: AsyncSession
    ) -> bool:
        stmt = _insert_if_absent(session, TideOmen).values(
            week_key=week_key,
            omen_id=omen_id,
            omen_name=omen_name,
            modifiers=modifiers,
        )
        result = await session.execute(stmt)
        return result.rowcount == 1

    @staticmethod
    async def create_tide_contribution(contribution: TideContribution, session: AsyncSession) -> None:
        try:
            session.add(contribution)
            await session.flush()
        except SQLAlchemyError as e:
            logging.error(f"Failed to create tide contribution: {e}")
            raise


class ReadData:
    @staticmethod
    async def count_runs_scoring_above(score: int, session: AsyncSession) -> int:
        """Count persisted runs whose score is strictly greater than score

        Args:
            score (int): Score to compare against

        Returns:
            int: Number of strictly better runs
        """
        stmt = select(func.count()).select_from(Run).where(Run.score > score)
        result = await session.execute(stmt)
        return result.scalar_one()

    @staticmethod
    async def read_leaderboard(
        session: AsyncSession,
        limit: int,
        week_key: str | None = None,
        seed: int | None = None,
    ) -> List[LeaderboardEntrySchema]:
        """Read the best runs, optionally restricted to a week and/or a seed

        Args:
            limit (int): Maximum number of entries
            week_key (str | None): Only runs submitted in this week
            seed (int | None): Only runs played on this seed

        Returns:
            List[LeaderboardEntrySchema]: Entries ordered by score descending
        """
        stmt = select(Run)
        if week_key is not None:
            stmt = stmt.where(Run.week_key == week_key)
        if seed is not None:
            stmt = stmt.where(Run.seed == seed)
        stmt = stmt.order_by(desc(Run.score)).limit(limit)

        result = await session.execute(stmt)
        return [LeaderboardEntrySchema.model_validate(run) for run in result.scalars().all()]

    @staticmethod
    async def read_ghost_tape(run_id: str, session: AsyncSession) -> tuple[bool, bytes | None]:
        """Read the ghost tape of a run

        Args:
            run_id (str): To identify the run

        Returns:
            tuple[bool, bytes | None]: Whether the run exists, and its tape if any
        """
        stmt = select(Run.ghost_tape).where(Run.id == run_id)
        result = await session.execute(stmt)
        row = result.first()
        if row is None:
            return False, None
        return True, row.ghost_tape

    @staticmethod
    async def read_regatta_seed(week_key: str, session: AsyncSession) -> int | None:
        stmt = select(Regatta.seed).where(Regatta.week_key == week_key)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def read_signal_fire(code: str, session: AsyncSession) -> SignalFire | None:
        stmt = select(SignalFire).where(SignalFire.code == code)
        result = await session.execute(stmt)
        return result.scalars().first()

    @staticmethod
    async def read_tide_omen(week_key: str, session: AsyncSession) -> TideOmen | None:
        stmt = select(TideOmen).where(TideOmen.week_key == week_key)
        result = await session.execute(stmt)
        return result.scalars().first()


class UpdateData:
    @staticmethod
    async def redeem_signal_fire(
        code: str,
        now: datetime,
        redeemed_by: str | None,
        session: AsyncSession,
    ) -> bool:
        """Mark an active, unexpired signal fire as redeemed in one statement

        The store decides the outcome: the row only changes when it is still
        unredeemed and its expiry instant has not passed when the update runs.

        Args:
            code (str): Normalized code
            now (datetime): Redemption instant, naive UTC
            redeemed_by (str | None): Run reference of the redeemer

        Returns:
            bool: True when exactly this call redeemed the code
        """
        stmt = (
            update(SignalFire)
            .where(
                SignalFire.code == code,
                SignalFire.redeemed.is_(False),
                SignalFire.expires_at >= now,
            )
            .values(redeemed=True, redeemed_at=now, redeemed_by=redeemed_by)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount == 1
