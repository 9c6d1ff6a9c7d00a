# app/payouts/calculator.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR
from typing import Union

from app.payouts.fees import withdrawal_fee

Number = Union[int, float, Decimal]

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class PayoutQuote:
    gross_payout: int
    fee: int
    total_deduction: int

    @property
    def is_zero(self) -> bool:
        return self.gross_payout == 0


def _to_decimal(value: Number) -> Decimal:
    # str() first so floats like 0.1 are taken at face value
    return value if isinstance(value, Decimal) else Decimal(str(value))


def compute_payout(pool_balance: Number, percentage: Number) -> PayoutQuote:
    """
    Share of `pool_balance` owed at `percentage`, floored to whole shillings,
    plus the gateway fee for that amount.

    percentage must be in (0, 100] and pool_balance >= 0.
    """
    balance = _to_decimal(pool_balance)
    pct = _to_decimal(percentage)

    if not (Decimal("0") < pct <= HUNDRED):
        raise ValueError(f"payout percentage must be in (0, 100], got {percentage}")
    if balance < 0:
        raise ValueError(f"pool balance must be >= 0, got {pool_balance}")

    gross = int((balance * pct / HUNDRED).to_integral_value(rounding=ROUND_FLOOR))
    if gross == 0:
        return PayoutQuote(gross_payout=0, fee=0, total_deduction=0)

    fee = withdrawal_fee(gross)
    return PayoutQuote(gross_payout=gross, fee=fee, total_deduction=gross + fee)
