from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Any
from datetime import datetime


@dataclass(frozen=True)
class PayoutConfig:
    id: str
    name: str
    phone: str
    payout_percentage: Decimal
    payout_frequency: str
    is_active: bool = True
    last_payout_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "payout_percentage": float(self.payout_percentage),
            "payout_frequency": self.payout_frequency,
            "is_active": self.is_active,
            "last_payout_date": self.last_payout_date.isoformat() if self.last_payout_date else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class RunningBalance:
    """
    Funds left in the pool during one run. Seeded from the gateway snapshot,
    only ever reduced, never below zero.
    """

    def __init__(self, initial: Decimal):
        initial = Decimal(initial)
        if initial < 0:
            raise ValueError(f"Pool balance cannot be negative: {initial}")
        self.initial = initial
        self._current = initial

    @property
    def current(self) -> Decimal:
        return self._current

    @property
    def deducted(self) -> Decimal:
        return self.initial - self._current

    def covers(self, amount: int) -> bool:
        return Decimal(amount) <= self._current

    def deduct(self, amount: int) -> Decimal:
        if amount < 0:
            raise ValueError(f"Cannot deduct a negative amount: {amount}")
        if not self.covers(amount):
            raise ValueError(f"Deduction of {amount} would overdraw balance {self._current}")
        self._current -= Decimal(amount)
        return self._current


OUTCOME_PAID = "paid"
OUTCOME_INELIGIBLE = "ineligible"
OUTCOME_INSUFFICIENT = "insufficient"
OUTCOME_ZERO = "zero"
OUTCOME_FAILED = "failed"


@dataclass
class PayoutDecision:
    beneficiary_id: str
    eligible: bool
    sufficient: bool = False
    gross_payout: int = 0
    fee: int = 0
    total_deduction: int = 0
    outcome: str = OUTCOME_INELIGIBLE
    reference: Optional[str] = None
    recorded: bool = True


@dataclass
class RunSummary:
    run_at: datetime
    initial_balance: Decimal
    final_balance: Decimal
    evaluated: int = 0
    paid: int = 0
    skipped_ineligible: int = 0
    skipped_insufficient: int = 0
    skipped_zero: int = 0
    unrecorded: int = 0
    decisions: list[PayoutDecision] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {
            "processed": self.evaluated,
            "paid": self.paid,
            "skipped_ineligible": self.skipped_ineligible,
            "skipped_insufficient": self.skipped_insufficient,
            "skipped_zero": self.skipped_zero,
            "unrecorded": self.unrecorded,
        }
