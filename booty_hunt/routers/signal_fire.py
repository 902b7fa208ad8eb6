from fastapi import APIRouter, Depends

from booty_hunt.db import Store, get_store
from booty_hunt.models.dc_models import SignalFireCreateModel, SignalFireRedeemModel
from booty_hunt.models.schema_models import SignalFireCreateResultSchema, SignalFireRedeemResultSchema
from booty_hunt.services import aid_exchange

signal_fire_router = APIRouter(prefix="/api/signal-fire")


class SignalFireAPI:
    @staticmethod
    @signal_fire_router.post("/create", response_model=SignalFireCreateResultSchema)
    async def create_signal_fire(
        request: SignalFireCreateModel,
        store: Store = Depends(get_store),
    ) -> SignalFireCreateResultSchema:
        return await aid_exchange.create_signal_fire(store, request)

    @staticmethod
    @signal_fire_router.post("/redeem", response_model=SignalFireRedeemResultSchema)
    async def redeem_signal_fire(
        request: SignalFireRedeemModel,
        store: Store = Depends(get_store),
    ) -> SignalFireRedeemResultSchema:
        """Redeem a code once; 404 for unknown codes, 409 when redeemed or expired"""
        return await aid_exchange.redeem_signal_fire(store, request)
