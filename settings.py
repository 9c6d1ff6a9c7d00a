# settings.py
from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Literal


DEV_JWT_SECRET = "dev-secret-change-me"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    ENV: Literal["dev", "staging", "prod"] = "dev"
    LOG_LEVEL: str = "INFO"

    # -----------------------
    # DB
    # -----------------------
    DATABASE_URL: str = ""
    DB_POOL_MAX: int = Field(default=5, ge=1)
    DB_STATEMENT_TIMEOUT_MS: int = 5000

    # -----------------------
    # Trigger + admin auth
    # -----------------------
    CRON_SECRET: str = ""

    JWT_SECRET: str = Field(default=DEV_JWT_SECRET, min_length=16)
    JWT_ALG: str = Field(default="HS256")
    JWT_ACCESS_MINUTES: int = Field(default=60)

    # -----------------------
    # Disbursement gateway
    # -----------------------
    PAYOUT_GATEWAY: Literal["payhero", "mock"] = "payhero"

    PAYHERO_BASE_URL: str = "https://backend.payhero.co.ke"
    PAYHERO_API_USERNAME: str = ""
    PAYHERO_API_PASSWORD: str = ""
    PAYHERO_WALLET_CHANNEL_ID: str = ""
    PAYHERO_NETWORK_CODE: str = "63902"  # M-Pesa
    PAYHERO_HTTP_TIMEOUT_S: float = 20.0

    # -----------------------
    # Payout schedule
    # -----------------------
    # Python weekday numbering: Monday=0 .. Sunday=6
    PAYOUT_WEEKLY_ANCHOR: int = Field(default=6, ge=0, le=6)
    PAYOUT_TIMEZONE: str = "Africa/Nairobi"

    PHONE_COUNTRY_CODE: str = "254"


settings = Settings()


def validate_env_settings() -> None:
    """
    Fail-fast check for deployed environments.

    dev tolerates missing values; staging/prod raise RuntimeError listing
    every missing variable at once.
    """
    env = (settings.ENV or "dev").strip().lower()
    if env == "dev":
        return

    missing: list[str] = []
    if not (settings.DATABASE_URL or "").strip():
        missing.append("DATABASE_URL")
    if not (settings.CRON_SECRET or "").strip():
        missing.append("CRON_SECRET")
    if not settings.JWT_SECRET or settings.JWT_SECRET == DEV_JWT_SECRET:
        missing.append("JWT_SECRET")

    if settings.PAYOUT_GATEWAY == "payhero":
        for name in ("PAYHERO_API_USERNAME", "PAYHERO_API_PASSWORD", "PAYHERO_WALLET_CHANNEL_ID"):
            if not (getattr(settings, name, "") or "").strip():
                missing.append(name)

    if missing:
        raise RuntimeError(
            f"Settings validation failed for ENV={env}. Missing required env vars: "
            + ", ".join(sorted(missing))
        )
