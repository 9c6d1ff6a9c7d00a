# app/providers/factory.py
from __future__ import annotations

from typing import Any, Dict

from settings import settings

_GATEWAY_CACHE: Dict[str, Any] = {}


def get_gateway(name: str | None = None):
    key = (name or settings.PAYOUT_GATEWAY or "").strip().lower()
    if not key:
        return None

    if key in _GATEWAY_CACHE:
        return _GATEWAY_CACHE[key]

    if key == "payhero":
        from app.providers.payhero.client import PayHeroGateway
        gateway = PayHeroGateway()

    elif key == "mock":
        from app.providers.mock import MockGateway
        gateway = MockGateway()

    else:
        return None

    _GATEWAY_CACHE[key] = gateway
    return gateway
