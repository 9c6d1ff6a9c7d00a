# app/payouts/eligibility.py
from __future__ import annotations

from datetime import date
from typing import Optional

FREQUENCY_WEEKLY = "weekly"
FREQUENCY_MONTHLY = "monthly"

SUNDAY = 6


def is_due(frequency: Optional[str], today: date, weekly_anchor: int = SUNDAY) -> bool:
    """
    weekly: due on the anchor weekday (Monday=0 .. Sunday=6).
    monthly: due on the 1st.
    Anything else is never due.
    """
    if frequency == FREQUENCY_WEEKLY:
        return today.weekday() == weekly_anchor
    if frequency == FREQUENCY_MONTHLY:
        return today.day == 1
    return False
