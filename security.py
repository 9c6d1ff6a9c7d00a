from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import hmac

from jose import jwt, JWTError

from app.payouts.errors import AuthorizationError
from settings import settings

ROLE_ADMIN = "admin"


# -----------------------
# Cron trigger credential
# -----------------------
def verify_cron_authorization(authorization: Optional[str]) -> None:
    """
    Raises AuthorizationError unless the header is exactly "Bearer <CRON_SECRET>".
    An unset CRON_SECRET rejects everything.
    """
    secret = (settings.CRON_SECRET or "").strip()
    if not secret:
        raise AuthorizationError("CRON_SECRET is not configured")

    expected = f"Bearer {secret}"
    if not authorization or not hmac.compare_digest(authorization.encode("utf-8"), expected.encode("utf-8")):
        raise AuthorizationError("Invalid cron credential")


# -----------------------
# Admin access tokens (JWT)
# -----------------------
def create_access_token(sub: str, role: str = ROLE_ADMIN, minutes: Optional[int] = None) -> str:
    exp_minutes = minutes or settings.JWT_ACCESS_MINUTES
    now = datetime.now(timezone.utc)
    payload = {
        "sub": sub,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=exp_minutes)).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError:
        return {}
