# routes/admin_payouts.py
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.payouts.errors import GatewayUnavailable, InsufficientFunds
from app.workers.payout_runner import process_single_payout
from deps.admin import require_admin
from deps.auth import CurrentUser
from deps.payouts import get_payout_gateway, get_payout_store
from schemas import ManualPayoutResponse, PayoutConfigCreate, PayoutConfigOut

logger = logging.getLogger("payouts")
router = APIRouter(prefix="/api/admin/payouts", tags=["admin-payouts"])

MAX_TOTAL_PERCENTAGE = 100


@router.get("", response_model=List[PayoutConfigOut])
def list_payout_configs(
    admin: CurrentUser = Depends(require_admin),
    store=Depends(get_payout_store),
):
    return [c.to_dict() for c in store.list_all()]


@router.post("", response_model=PayoutConfigOut, status_code=201)
def create_payout_config(
    body: PayoutConfigCreate,
    admin: CurrentUser = Depends(require_admin),
    store=Depends(get_payout_store),
):
    if body.is_active:
        total = store.active_percentage_total()
        if total + body.payout_percentage > MAX_TOTAL_PERCENTAGE:
            raise HTTPException(
                status_code=400,
                detail=f"Adding this beneficiary would exceed 100%. Current total is {total.normalize():f}%.",
            )

    config = store.create(
        name=body.name,
        phone=body.phone,
        payout_percentage=body.payout_percentage,
        payout_frequency=body.payout_frequency,
        is_active=body.is_active,
    )
    logger.info("payout config created id=%s by=%s", config.id, admin.user_id)
    return config.to_dict()


@router.delete("/{config_id}")
def delete_payout_config(
    config_id: str,
    admin: CurrentUser = Depends(require_admin),
    store=Depends(get_payout_store),
):
    if not store.delete(config_id):
        raise HTTPException(status_code=404, detail="Payout configuration not found.")
    logger.info("payout config deleted id=%s by=%s", config_id, admin.user_id)
    return {"message": "Payout configuration deleted"}


@router.post("/{config_id}/payout-now", response_model=ManualPayoutResponse)
def payout_now(
    config_id: str,
    admin: CurrentUser = Depends(require_admin),
    store=Depends(get_payout_store),
    gateway=Depends(get_payout_gateway),
):
    config = store.get(config_id)
    if config is None:
        raise HTTPException(status_code=404, detail="Payout configuration not found.")

    try:
        result = process_single_payout(gateway, store, config)
    except InsufficientFunds as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except GatewayUnavailable as exc:
        logger.error("manual payout failed id=%s err=%s", config_id, exc)
        raise HTTPException(status_code=502, detail="GATEWAY_UNAVAILABLE")

    logger.info("manual payout initiated id=%s by=%s reference=%s", config_id, admin.user_id, result["reference"])
    return {"message": "Payout initiated successfully!", "result": result}
