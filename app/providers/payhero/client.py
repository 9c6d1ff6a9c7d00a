# app/providers/payhero/client.py
from __future__ import annotations

import base64
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx

from app.catalog.destinations import normalize_phone
from app.payouts.errors import GatewayUnavailable
from app.providers.base import DisbursementReceipt, WithdrawalRequest
from app.providers.payhero.config import PayHeroConfig, payhero_config
from app.providers.payhero.http import HttpClient, HttpResponse
from services.redaction import redact_text

logger = logging.getLogger("payouts.payhero")

PAYMENT_SERVICE_B2C = "b2c"
TRANSACTION_QUERY_PARAMS = ("page", "per_page")


class PayHeroGateway:
    """
    PayHero v2 client.

    get_balance/withdraw are what the payout run needs; the wallet,
    transaction and top-up calls back the admin endpoints.
    """

    def __init__(self, config: Optional[PayHeroConfig] = None, http: Optional[HttpClient] = None):
        self.config = config or payhero_config()
        self.http = http or HttpClient(timeout_s=self.config.timeout_s)

    # -----------------------
    # Pool balance
    # -----------------------
    def get_balance(self) -> Decimal:
        payload = self._get(f"/api/v2/payment_channels/{self.config.channel_id}", op="balance")
        plain = payload.get("balance_plain") if isinstance(payload, dict) else None
        if not isinstance(payload, dict) or (plain is not None and not isinstance(plain, dict)):
            raise GatewayUnavailable("PayHero balance response malformed")
        return _to_decimal((plain or {}).get("balance"))

    def get_service_balance(self) -> Decimal:
        payload = self._get("/api/v2/wallets", op="service_balance", params={"wallet_type": "service_wallet"})
        if not isinstance(payload, dict):
            raise GatewayUnavailable("PayHero balance response malformed")
        return _to_decimal(payload.get("available_balance"))

    # -----------------------
    # Money movement
    # -----------------------
    def withdraw(self, request: WithdrawalRequest) -> DisbursementReceipt:
        body = {
            "external_reference": request.reference,
            "amount": int(request.amount),
            "phone_number": normalize_phone(request.destination),
            "network_code": self.config.network_code,
            "channel": request.channel,
            "channel_id": int(self.config.channel_id),
            "payment_service": PAYMENT_SERVICE_B2C,
        }
        payload = self._post("/api/v2/withdraw", body, op="withdraw")
        # a 2xx with success=false is a rejected withdrawal
        ok = not (isinstance(payload, dict) and payload.get("success") is False)
        logger.info(
            "payhero withdraw response reference=%s amount=%s ok=%s",
            request.reference,
            request.amount,
            ok,
        )
        provider_ref = None
        if isinstance(payload, dict):
            provider_ref = payload.get("reference") or payload.get("CheckoutRequestID")
        return DisbursementReceipt(
            reference=request.reference,
            ok=ok,
            response=payload if isinstance(payload, dict) else {"body": payload},
            provider_ref=str(provider_ref) if provider_ref else None,
        )

    def topup(self, *, amount: int, phone_number: str) -> Any:
        body = {"amount": int(amount), "phone_number": normalize_phone(phone_number)}
        return self._post("/api/v2/topup", body, op="topup")

    def list_transactions(self, params: Optional[dict[str, Any]] = None) -> Any:
        forwarded = {k: v for k, v in (params or {}).items() if k in TRANSACTION_QUERY_PARAMS and v is not None}
        return self._get("/api/v2/transactions", op="transactions", params=forwarded)

    # -----------------------
    # Transport
    # -----------------------
    def _headers(self) -> dict[str, str]:
        missing = self.config.missing()
        if missing:
            raise GatewayUnavailable(f"PayHero credentials are not configured: {', '.join(missing)}")
        raw = f"{self.config.username}:{self.config.password}".encode("utf-8")
        token = base64.b64encode(raw).decode("ascii")
        return {"Authorization": f"Basic {token}", "Content-Type": "application/json"}

    def _get(self, path: str, *, op: str, params: Optional[dict[str, Any]] = None) -> Any:
        headers = self._headers()
        try:
            resp = self.http.get(
                self.config.base_url + path,
                headers=headers,
                params=params,
                debug=logger.isEnabledFor(logging.DEBUG),
            )
        except httpx.HTTPError as exc:
            logger.warning("payhero %s transport error err=%s", op, exc)
            raise GatewayUnavailable(f"PayHero {op} failed: {type(exc).__name__}") from exc
        return _unwrap(resp, op=op)

    def _post(self, path: str, body: dict[str, Any], *, op: str) -> Any:
        headers = self._headers()
        try:
            resp = self.http.post(
                self.config.base_url + path,
                headers=headers,
                json_body=body,
                debug=logger.isEnabledFor(logging.DEBUG),
            )
        except httpx.HTTPError as exc:
            logger.warning("payhero %s transport error err=%s", op, exc)
            raise GatewayUnavailable(f"PayHero {op} failed: {type(exc).__name__}") from exc
        return _unwrap(resp, op=op)


def _unwrap(resp: HttpResponse, *, op: str) -> Any:
    if resp.ok:
        return resp.json
    body = redact_text((resp.text or "")[:500])
    logger.warning("payhero %s rejected status=%s body=%s", op, resp.status_code, body)
    raise GatewayUnavailable(
        f"PayHero API error ({resp.status_code})",
        status_code=resp.status_code,
        body=body,
    )


def _to_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, bool):
        raise GatewayUnavailable("PayHero balance response malformed")
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise GatewayUnavailable("PayHero balance response malformed") from exc
    if not amount.is_finite() or amount < 0:
        raise GatewayUnavailable("PayHero balance response malformed")
    return amount
