# app/providers/payhero/config.py
from __future__ import annotations

from dataclasses import dataclass

from settings import settings


@dataclass(frozen=True)
class PayHeroConfig:
    base_url: str
    username: str
    password: str
    channel_id: str
    network_code: str
    timeout_s: float

    def missing(self) -> list[str]:
        out: list[str] = []
        if not self.username:
            out.append("PAYHERO_API_USERNAME")
        if not self.password:
            out.append("PAYHERO_API_PASSWORD")
        if not self.channel_id:
            out.append("PAYHERO_WALLET_CHANNEL_ID")
        return out


def payhero_config() -> PayHeroConfig:
    return PayHeroConfig(
        base_url=(settings.PAYHERO_BASE_URL or "").strip().rstrip("/"),
        username=(settings.PAYHERO_API_USERNAME or "").strip(),
        password=(settings.PAYHERO_API_PASSWORD or "").strip(),
        channel_id=(settings.PAYHERO_WALLET_CHANNEL_ID or "").strip(),
        network_code=(settings.PAYHERO_NETWORK_CODE or "63902").strip(),
        timeout_s=float(settings.PAYHERO_HTTP_TIMEOUT_S),
    )
