# schemas.py
from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from decimal import Decimal
from typing import Optional, Literal

from app.catalog.destinations import KENYAN_PHONE_RE

PayoutFrequency = Literal["weekly", "monthly"]


# -------- PAYOUT CONFIGS --------
class PayoutConfigCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    phone: str
    payout_percentage: Decimal = Field(gt=0, le=100)
    payout_frequency: PayoutFrequency
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v

    @field_validator("phone")
    @classmethod
    def _kenyan_phone(cls, v: str) -> str:
        v = (v or "").strip()
        if not KENYAN_PHONE_RE.match(v):
            raise ValueError("Phone number must be a valid Kenyan number.")
        return v


class PayoutConfigOut(BaseModel):
    id: str
    name: str
    phone: str
    payout_percentage: float
    payout_frequency: PayoutFrequency
    is_active: bool
    last_payout_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ManualPayoutResult(BaseModel):
    reference: str
    amount: int
    fee: int
    total_deduction: int
    recorded: bool
    provider_ref: Optional[str] = None


class ManualPayoutResponse(BaseModel):
    message: str
    result: ManualPayoutResult


# -------- PAYHERO --------
class WalletBalances(BaseModel):
    service_balance: float
    payments_balance: float


class TopupRequest(BaseModel):
    amount: int = Field(gt=0)
    phone_number: str

    @field_validator("phone_number")
    @classmethod
    def _kenyan_phone(cls, v: str) -> str:
        v = (v or "").strip()
        if not KENYAN_PHONE_RE.match(v):
            raise ValueError("Phone number must be a valid Kenyan number.")
        return v
