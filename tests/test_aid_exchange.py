import asyncio

import pytest

from booty_hunt.domain import signal_fire_rules
from booty_hunt.errors import ConflictError, NotFoundError, StorageError, ValidationError
from booty_hunt.models.dc_models import SignalFireCreateModel, SignalFireRedeemModel
from booty_hunt.models.schemas import SignalFire
from booty_hunt.services import aid_exchange
from conftest import count_rows


def create_request(**overrides) -> SignalFireCreateModel:
    fields = dict(creator_run="run-123", aid_type="supplies", aid_amount=10)
    fields.update(overrides)
    return SignalFireCreateModel(**fields)


async def issue(store, **overrides) -> str:
    return (await aid_exchange.create_signal_fire(store, create_request(**overrides))).code


async def test_create_then_redeem_once(store):
    code = await issue(store)
    assert len(code) == 8

    redeemed = await aid_exchange.redeem_signal_fire(store, SignalFireRedeemModel(code=code))
    assert redeemed.aid_type == "supplies"
    assert redeemed.aid_amount == 10
    assert redeemed.heat_cost == 5.0

    with pytest.raises(ConflictError, match="already redeemed"):
        await aid_exchange.redeem_signal_fire(store, SignalFireRedeemModel(code=code))


async def test_redeem_normalizes_the_code(store):
    code = await issue(store, aid_type="intel", aid_amount=3)
    redeemed = await aid_exchange.redeem_signal_fire(store, SignalFireRedeemModel(code=f"  {code.lower()} "))
    assert redeemed.aid_type == "intel"
    assert redeemed.aid_amount == 3


async def test_unknown_code_is_not_found(store):
    with pytest.raises(NotFoundError):
        await aid_exchange.redeem_signal_fire(store, SignalFireRedeemModel(code="ZZZZZZZZ"))


@pytest.mark.parametrize(
    "overrides",
    [dict(aid_type="gold"), dict(aid_amount=0), dict(aid_amount=101)],
)
async def test_invalid_requests_write_nothing(store, overrides):
    with pytest.raises(ValidationError):
        await issue(store, **overrides)
    assert await count_rows(store, SignalFire) == 0


async def test_code_is_usable_until_expiry(store, frozen_clock):
    code = await issue(store)
    frozen_clock.advance(hours=71, minutes=59)
    redeemed = await aid_exchange.redeem_signal_fire(store, SignalFireRedeemModel(code=code))
    assert redeemed.aid_amount == 10


async def test_code_is_usable_at_the_expiry_instant(store, frozen_clock):
    code = await issue(store)
    frozen_clock.advance(hours=72)
    redeemed = await aid_exchange.redeem_signal_fire(store, SignalFireRedeemModel(code=code))
    assert redeemed.aid_amount == 10


async def test_expired_code_is_refused_and_stays_active(store, frozen_clock):
    code = await issue(store)
    frozen_clock.advance(hours=72, seconds=1)

    with pytest.raises(ConflictError, match="expired"):
        await aid_exchange.redeem_signal_fire(store, SignalFireRedeemModel(code=code))

    async with store.session() as session:
        row = await session.get(SignalFire, code)
        assert row.redeemed is False
        assert row.redeemed_at is None


async def test_already_redeemed_takes_priority_over_expiry(store, frozen_clock):
    code = await issue(store)
    await aid_exchange.redeem_signal_fire(store, SignalFireRedeemModel(code=code))
    frozen_clock.advance(days=4)

    with pytest.raises(ConflictError, match="already redeemed"):
        await aid_exchange.redeem_signal_fire(store, SignalFireRedeemModel(code=code))


async def test_concurrent_redeems_have_exactly_one_winner(store):
    code = await issue(store)

    results = await asyncio.gather(
        *(aid_exchange.redeem_signal_fire(store, SignalFireRedeemModel(code=code)) for _ in range(10)),
        return_exceptions=True,
    )

    successes = [result for result in results if not isinstance(result, Exception)]
    conflicts = [result for result in results if isinstance(result, ConflictError)]
    assert len(successes) == 1
    assert len(conflicts) == 9


async def test_redemption_records_redeemer(store, frozen_clock):
    code = await issue(store)
    await aid_exchange.redeem_signal_fire(store, SignalFireRedeemModel(code=code, redeemed_by="run-456"))

    async with store.session() as session:
        row = await session.get(SignalFire, code)
        assert row.redeemed is True
        assert row.redeemed_by == "run-456"
        assert row.redeemed_at == frozen_clock.now.replace(tzinfo=None)


async def test_code_collision_is_retried(store, monkeypatch):
    codes = iter(["AAAAAAAA", "AAAAAAAA", "BBBBBBBB"])
    monkeypatch.setattr(signal_fire_rules, "generate_code", lambda rng: next(codes))

    assert await issue(store) == "AAAAAAAA"
    assert await issue(store) == "BBBBBBBB"
    assert await count_rows(store, SignalFire) == 2


async def test_persistent_collisions_surface_as_storage_error(store, monkeypatch):
    monkeypatch.setattr(signal_fire_rules, "generate_code", lambda rng: "CCCCCCCC")
    await issue(store)

    with pytest.raises(StorageError):
        await issue(store)
    assert await count_rows(store, SignalFire) == 1
