"""Shared fixtures: a fresh in-memory store per test, a pinned clock, an API client."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from booty_hunt.create_sqlite_engine import create_sqlite_engine
from booty_hunt.db import Store, get_store
from booty_hunt.main import app
from booty_hunt.models.dc_models import RunSubmissionModel
from booty_hunt.services import clock

# A Wednesday in ISO week 2026-W43.
FROZEN_NOW = datetime(2026, 10, 21, 12, 0, tzinfo=timezone.utc)


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def frozen_clock(monkeypatch):
    frozen = FrozenClock(FROZEN_NOW)
    monkeypatch.setattr(clock, "utc_now", frozen)
    return frozen


@pytest.fixture
async def store():
    test_store = Store(create_sqlite_engine(":memory:"), busy_timeout=2.0)
    await test_store.create_tables()
    yield test_store
    await test_store.dispose()


@pytest.fixture
async def client(store):
    app.dependency_overrides[get_store] = lambda: store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def make_run(**overrides) -> RunSubmissionModel:
    fields = dict(
        seed=12345,
        ship_class="sloop",
        doctrine_id="plunder",
        score=5000,
        waves=10,
        victory=False,
        ships_destroyed=15,
        damage_dealt=3000,
        max_combo=5,
        time_played=600.0,
        max_heat=45.0,
        ghost_tape=None,
        player_name="Test Player",
    )
    fields.update(overrides)
    return RunSubmissionModel(**fields)


async def count_rows(store: Store, table) -> int:
    async with store.session() as session:
        result = await session.execute(select(func.count()).select_from(table))
        return result.scalar_one()
