from fastapi import APIRouter, Depends

from booty_hunt.db import Store, get_store
from booty_hunt.models.dc_models import TideContributionModel
from booty_hunt.models.schema_models import TideContributeResultSchema, TideOmenSchema
from booty_hunt.services import tide_ledger

tide_router = APIRouter(prefix="/api/tide")


class TideAPI:
    @staticmethod
    @tide_router.get("", response_model=TideOmenSchema)
    async def get_tide_omen(store: Store = Depends(get_store)) -> TideOmenSchema:
        return await tide_ledger.get_tide_omen(store)

    @staticmethod
    @tide_router.post("/contribute", response_model=TideContributeResultSchema)
    async def contribute_tide(
        contribution: TideContributionModel,
        store: Store = Depends(get_store),
    ) -> TideContributeResultSchema:
        return await tide_ledger.contribute_tide(store, contribution)
