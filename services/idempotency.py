from __future__ import annotations

from datetime import datetime


def epoch_ms(at: datetime) -> int:
    return int(at.timestamp() * 1000)


def withdrawal_reference(beneficiary_id: str, run_at: datetime, *, prefix: str = "payout") -> str:
    """
    External reference sent with a withdrawal.

    Stable for a given beneficiary within one run, so a retried transport
    call resubmits the same reference and the gateway can dedupe it.
    """
    return f"{prefix}_{beneficiary_id}_{epoch_ms(run_at)}"
