# app/payouts/fees.py
from __future__ import annotations

from decimal import Decimal
from typing import Optional, Union

Amount = Union[int, Decimal]

# (low, high, fee) in KES, inclusive ranges, ascending. high=None is open-ended.
PAYHERO_WITHDRAWAL_FEES: tuple[tuple[int, Optional[int], int], ...] = (
    (1, 49, 0),
    (50, 499, 6),
    (500, 999, 10),
    (1000, 1499, 15),
    (1500, 2499, 20),
    (2500, 3499, 25),
    (3500, 4999, 30),
    (5000, 7499, 40),
    (7500, 9999, 45),
    (10000, 14999, 50),
    (15000, 19999, 55),
    (20000, 34999, 80),
    (35000, None, 105),
)


def withdrawal_fee(amount: Amount) -> int:
    """
    Gateway fee charged on top of a withdrawal of `amount` shillings.

    Only whole, positive amounts are valid; the calculator floors before
    calling this.
    """
    if isinstance(amount, bool) or Decimal(amount) != Decimal(amount).to_integral_value():
        raise ValueError(f"Withdrawal amount must be a whole number of shillings, got {amount!r}")
    value = int(amount)
    if value <= 0:
        raise ValueError(f"Withdrawal amount must be positive, got {amount!r}")

    for low, high, fee in PAYHERO_WITHDRAWAL_FEES:
        if value >= low and (high is None or value <= high):
            return fee

    # unreachable: the table is exhaustive from 1 upward
    raise ValueError(f"No fee tier for amount {amount!r}")
