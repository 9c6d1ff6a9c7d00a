from __future__ import annotations

import re

from settings import settings

# 2547XXXXXXXX or 07XXXXXXXX
KENYAN_PHONE_RE = re.compile(r"^(254\d{9}|0\d{9})$")


def _clean(value: str | None) -> str:
    return re.sub(r"[\s\-()]", "", (value or "").strip())


def is_valid_phone(value: str | None) -> bool:
    return bool(KENYAN_PHONE_RE.match(_clean(value)))


def normalize_phone(value: str | None, country_code: str | None = None) -> str:
    """
    Canonical international form without '+', e.g. 0712345678 -> 254712345678.
    Numbers already carrying a country code pass through.
    """
    phone = _clean(value)
    if phone.startswith("+"):
        return phone[1:]
    if phone.startswith("0"):
        code = (country_code or settings.PHONE_COUNTRY_CODE or "254").strip().lstrip("+")
        return f"{code}{phone[1:]}"
    return phone
