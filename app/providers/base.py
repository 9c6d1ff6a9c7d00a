from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional, Protocol

CHANNEL_MOBILE = "mobile"


@dataclass(frozen=True)
class WithdrawalRequest:
    reference: str
    amount: int
    destination: str
    channel: str = CHANNEL_MOBILE


@dataclass(frozen=True)
class DisbursementReceipt:
    reference: str
    ok: bool = True
    response: dict[str, Any] = field(default_factory=dict)
    provider_ref: Optional[str] = None


class DisbursementGateway(Protocol):
    def get_balance(self) -> Decimal: ...
    def withdraw(self, request: WithdrawalRequest) -> DisbursementReceipt: ...
