"""DB service layer for the tide calendar."""

import logging

from uuid6 import uuid7

from booty_hunt.crud import CreateData, ReadData
from booty_hunt.db import Store
from booty_hunt.domain.tide_omens import omen_for_week
from booty_hunt.domain.week_clock import week_key
from booty_hunt.errors import InternalError
from booty_hunt.models.dc_models import TideContributionModel
from booty_hunt.models.schema_models import TideContributeResultSchema, TideOmenSchema
from booty_hunt.models.schemas import TideContribution
from booty_hunt.services import clock


async def get_tide_omen(store: Store) -> TideOmenSchema:
    """This week's omen, materialized on first access.

    A concurrent first-of-week caller may insert the row first; the conditional
    insert then does nothing and the stored row is read back.
    """
    current_week = week_key(clock.utc_now())

    async with store.session() as session:
        omen = await ReadData.read_tide_omen(current_week, session)
        if omen is None:
            definition = omen_for_week(current_week)
            inserted = await CreateData.create_tide_omen_if_absent(
                current_week,
                definition.omen_id,
                definition.omen_name,
                dict(definition.modifiers),
                session,
            )
            if inserted:
                logging.info(f"Tide omen {definition.omen_id} set for {current_week}")
            omen = await ReadData.read_tide_omen(current_week, session)
            if omen is None:
                raise InternalError(f"Tide omen missing for {current_week} after insert")

        return TideOmenSchema.model_validate(omen)


async def contribute_tide(store: Store, contribution: TideContributionModel) -> TideContributeResultSchema:
    # Write-only from here; aggregation belongs to whoever consumes the ledger.
    row = TideContribution(
        id=str(uuid7()),
        week_key=week_key(clock.utc_now()),
        metric=contribution.metric,
        value=contribution.value,
    )
    async with store.session() as session:
        await CreateData.create_tide_contribution(row, session)

    logging.debug(f"Tide contribution {row.metric}={row.value} for {row.week_key}")
    return TideContributeResultSchema(accepted=True)
