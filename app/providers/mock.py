from __future__ import annotations

from decimal import Decimal
from typing import Optional

from app.payouts.errors import GatewayUnavailable
from app.payouts.fees import withdrawal_fee
from app.providers.base import DisbursementReceipt, WithdrawalRequest


class MockGateway:
    """
    Dev/test gateway.

    Holds a balance in memory and deducts amount + fee on each withdrawal,
    the way the real wallet does. Set fail_on to a destination to simulate an
    outage for that beneficiary, or receipt_ok=False for a rejected withdrawal.
    """

    def __init__(
        self,
        *,
        balance: Decimal | int = Decimal("0"),
        succeed: bool = True,
        fail_on: Optional[str] = None,
        balance_error: bool = False,
        receipt_ok: bool = True,
    ):
        self.balance = Decimal(balance)
        self.succeed = succeed
        self.fail_on = fail_on
        self.balance_error = balance_error
        self.receipt_ok = receipt_ok
        self.withdrawals: list[WithdrawalRequest] = []
        self.balance_calls = 0

    def get_balance(self) -> Decimal:
        self.balance_calls += 1
        if self.balance_error:
            raise GatewayUnavailable("Gateway timeout", status_code=504)
        return self.balance

    def withdraw(self, request: WithdrawalRequest) -> DisbursementReceipt:
        if not self.succeed or (self.fail_on and request.destination == self.fail_on):
            raise GatewayUnavailable("Gateway timeout", status_code=504)

        if not self.receipt_ok:
            return DisbursementReceipt(
                reference=request.reference,
                ok=False,
                response={"http_status": 200, "status": "FAILED", "mock": True},
            )

        self.withdrawals.append(request)
        self.balance -= Decimal(request.amount + withdrawal_fee(request.amount))
        return DisbursementReceipt(
            reference=request.reference,
            ok=True,
            response={"http_status": 201, "status": "QUEUED", "mock": True},
            provider_ref=f"mock-{request.reference}",
        )

    def get_service_balance(self) -> Decimal:
        return Decimal("0")

    def list_transactions(self, params: Optional[dict] = None) -> dict:
        return {
            "transactions": [
                {"reference": w.reference, "amount": w.amount, "channel": w.channel} for w in self.withdrawals
            ],
            "page": (params or {}).get("page") or 1,
        }

    def topup(self, *, amount: int, phone_number: str) -> dict:
        return {"success": True, "status": "QUEUED", "amount": int(amount), "mock": True}
