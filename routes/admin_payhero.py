# routes/admin_payhero.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.payouts.errors import GatewayUnavailable
from deps.admin import require_admin
from deps.auth import CurrentUser
from deps.payouts import get_payout_gateway
from schemas import TopupRequest, WalletBalances

logger = logging.getLogger("payouts")
router = APIRouter(prefix="/api/admin/payhero", tags=["admin-payhero"])


def _require_capability(gateway, name: str):
    fn = getattr(gateway, name, None)
    if fn is None:
        raise HTTPException(status_code=501, detail="NOT_SUPPORTED_BY_GATEWAY")
    return fn


@router.get("/balance", response_model=WalletBalances)
def wallet_balances(
    admin: CurrentUser = Depends(require_admin),
    gateway=Depends(get_payout_gateway),
):
    service_balance = _require_capability(gateway, "get_service_balance")
    try:
        return {
            "service_balance": float(service_balance()),
            "payments_balance": float(gateway.get_balance()),
        }
    except GatewayUnavailable as exc:
        logger.error("payhero balance lookup failed err=%s", exc)
        raise HTTPException(status_code=502, detail="GATEWAY_UNAVAILABLE")


@router.get("/transactions")
def transactions(
    page: Optional[int] = Query(default=None, ge=1),
    per_page: Optional[int] = Query(default=None, ge=1, le=100),
    admin: CurrentUser = Depends(require_admin),
    gateway=Depends(get_payout_gateway),
):
    list_transactions = _require_capability(gateway, "list_transactions")
    try:
        return list_transactions({"page": page, "per_page": per_page})
    except GatewayUnavailable as exc:
        logger.error("payhero transactions lookup failed err=%s", exc)
        raise HTTPException(status_code=502, detail="GATEWAY_UNAVAILABLE")


@router.post("/topup")
def topup(
    body: TopupRequest,
    admin: CurrentUser = Depends(require_admin),
    gateway=Depends(get_payout_gateway),
):
    do_topup = _require_capability(gateway, "topup")
    try:
        result = do_topup(amount=body.amount, phone_number=body.phone_number)
    except GatewayUnavailable as exc:
        logger.error("payhero topup failed err=%s", exc)
        raise HTTPException(status_code=502, detail="GATEWAY_UNAVAILABLE")
    logger.info("payhero topup requested amount=%s by=%s", body.amount, admin.user_id)
    return result
