# app/payouts/errors.py
from __future__ import annotations

from typing import Any, Optional


class AuthorizationError(Exception):
    """Missing or invalid trigger credential."""


class GatewayUnavailable(Exception):
    def __init__(self, message: str, *, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class InsufficientFunds(Exception):
    def __init__(self, required: Any, available: Any):
        super().__init__(f"Insufficient balance. Requires {required}, but only {available} is available.")
        self.required = required
        self.available = available


class PersistenceError(Exception):
    pass


class PayoutRunAborted(Exception):
    """
    A run stopped early because the gateway failed.

    stage is "balance" (nothing was attempted) or "withdraw" (the loop stopped
    at beneficiary_id). summary holds whatever completed before the failure.
    """

    def __init__(self, stage: str, cause: GatewayUnavailable, summary, beneficiary_id: Optional[str] = None):
        super().__init__(f"Payout run aborted at stage={stage}: {cause}")
        self.stage = stage
        self.cause = cause
        self.summary = summary
        self.beneficiary_id = beneficiary_id
