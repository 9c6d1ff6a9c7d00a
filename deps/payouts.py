from fastapi import HTTPException

from app.payouts.repository import PayoutConfigRepository
from app.providers.factory import get_gateway
from app.workers.payout_runner import PayoutRunner
from settings import settings


def get_payout_gateway():
    gateway = get_gateway()
    if gateway is None:
        raise HTTPException(status_code=503, detail="GATEWAY_NOT_CONFIGURED")
    return gateway


def get_payout_store() -> PayoutConfigRepository:
    return PayoutConfigRepository()


def build_runner(gateway, store) -> PayoutRunner:
    return PayoutRunner(
        gateway,
        store,
        weekly_anchor=settings.PAYOUT_WEEKLY_ANCHOR,
        tz=settings.PAYOUT_TIMEZONE,
    )
