# routes/cron.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from app.payouts.errors import PayoutRunAborted
from deps.payouts import build_runner, get_payout_gateway, get_payout_store
from security import verify_cron_authorization

logger = logging.getLogger("payouts")
router = APIRouter(prefix="/api/cron", tags=["cron"])


def require_cron_secret(authorization: Optional[str] = Header(default=None)) -> None:
    verify_cron_authorization(authorization)


@router.get("/process-payouts", dependencies=[Depends(require_cron_secret)])
def process_payouts(
    gateway=Depends(get_payout_gateway),
    store=Depends(get_payout_store),
):
    runner = build_runner(gateway, store)
    try:
        summary = runner.run()
    except PayoutRunAborted as exc:
        logger.error(
            "cron payout run failed stage=%s beneficiary=%s status_code=%s",
            exc.stage,
            exc.beneficiary_id,
            exc.cause.status_code,
        )
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "processed": exc.summary.evaluated,
                "message": "PAYOUT_RUN_FAILED",
            },
        )
    except Exception:
        logger.exception("cron payout run crashed")
        return JSONResponse(
            status_code=500,
            content={"status": "error", "processed": 0, "message": "PAYOUT_RUN_FAILED"},
        )

    counts = summary.counts()
    return {
        "status": "success",
        "processed": counts["processed"],
        "paid": counts["paid"],
        "skipped_ineligible": counts["skipped_ineligible"],
        "skipped_insufficient": counts["skipped_insufficient"],
    }
