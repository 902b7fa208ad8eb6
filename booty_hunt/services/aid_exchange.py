"""DB service layer for signal fires (one-time aid codes).

Redemption is a single conditional update; its affected-row count decides who
wins, so concurrent redeemers of one code get exactly one success.
"""

import logging
import secrets

from booty_hunt.crud import CreateData, ReadData, UpdateData
from booty_hunt.db import Store
from booty_hunt.domain import signal_fire_rules, validation
from booty_hunt.errors import ConflictError, NotFoundError, StorageError
from booty_hunt.models.dc_models import SignalFireCreateModel, SignalFireRedeemModel
from booty_hunt.models.schema_models import SignalFireCreateResultSchema, SignalFireRedeemResultSchema
from booty_hunt.services import clock

MAX_CODE_ATTEMPTS = 5

_code_rng = secrets.SystemRandom()


async def create_signal_fire(store: Store, request: SignalFireCreateModel) -> SignalFireCreateResultSchema:
    """Issue a new active code valid for 72 hours.

    Code collisions are detected by the store's uniqueness constraint and
    retried with a fresh code.

    Raises:
        ValidationError: Unknown aid type or amount outside 1-100
        StorageError: No free code after MAX_CODE_ATTEMPTS tries
    """
    validation.validate_aid_type(request.aid_type)
    validation.validate_aid_amount(request.aid_amount)

    issued_at = clock.utc_now()
    expires_at = clock.to_storage(signal_fire_rules.expires_at(issued_at))

    async with store.session() as session:
        for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
            code = signal_fire_rules.generate_code(_code_rng)
            created = await CreateData.create_signal_fire_if_absent(
                code,
                request.creator_run,
                request.aid_type,
                request.aid_amount,
                signal_fire_rules.HEAT_COST,
                expires_at,
                session,
            )
            if created:
                break
            logging.warning(f"Signal fire code collision on attempt {attempt}")
        else:
            raise StorageError("Could not allocate a unique signal fire code")

    logging.info(f"Signal fire {code} issued: {request.aid_type} x{request.aid_amount}")
    return SignalFireCreateResultSchema(code=code)


async def redeem_signal_fire(store: Store, request: SignalFireRedeemModel) -> SignalFireRedeemResultSchema:
    """Redeem a code exactly once.

    Failure priority: unknown code, then already redeemed, then expired.

    Raises:
        NotFoundError: No signal fire with this code
        ConflictError: Already redeemed, or past its expiry
    """
    code = signal_fire_rules.normalize_code(request.code)
    now = clock.to_storage(clock.utc_now())

    async with store.session() as session:
        redeemed = await UpdateData.redeem_signal_fire(code, now, request.redeemed_by, session)
        signal_fire = await ReadData.read_signal_fire(code, session)

    if signal_fire is None:
        raise NotFoundError("Invalid signal fire code")
    if not redeemed:
        if signal_fire.redeemed:
            logging.info(f"Signal fire {code} refused: already redeemed")
            raise ConflictError("Signal fire already redeemed")
        logging.info(f"Signal fire {code} refused: expired at {signal_fire.expires_at}")
        raise ConflictError("Signal fire expired")

    logging.info(f"Signal fire {code} redeemed")
    return SignalFireRedeemResultSchema.model_validate(signal_fire)
