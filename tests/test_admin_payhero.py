from __future__ import annotations

from decimal import Decimal

from app.payouts.errors import GatewayUnavailable
from deps.payouts import get_payout_gateway

URL = "/api/admin/payhero"


class _BalanceOnlyGateway:
    def get_balance(self):
        return Decimal("10")

    def withdraw(self, request):
        raise AssertionError("not used")


def test_requires_admin(client, user_headers):
    assert client.get(f"{URL}/balance").status_code == 401
    assert client.get(f"{URL}/balance", headers=user_headers).status_code == 403
    assert client.post(f"{URL}/topup", json={"amount": 10, "phone_number": "0712345678"}, headers=user_headers).status_code == 403


def test_balance(client, admin_headers):
    r = client.get(f"{URL}/balance", headers=admin_headers)
    assert r.status_code == 200
    assert r.json() == {"service_balance": 0.0, "payments_balance": 50000.0}


def test_balance_gateway_error_is_502(client, admin_headers, gateway):
    gateway.balance_error = True
    r = client.get(f"{URL}/balance", headers=admin_headers)
    assert r.status_code == 502
    assert r.json()["detail"] == "GATEWAY_UNAVAILABLE"


def test_transactions_forwards_paging(client, admin_headers):
    r = client.get(f"{URL}/transactions", params={"page": 3, "per_page": 20}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["page"] == 3


def test_transactions_rejects_bad_paging(client, admin_headers):
    assert client.get(f"{URL}/transactions", params={"page": 0}, headers=admin_headers).status_code == 422
    assert client.get(f"{URL}/transactions", params={"per_page": 500}, headers=admin_headers).status_code == 422


def test_topup(client, admin_headers):
    r = client.post(f"{URL}/topup", json={"amount": 1500, "phone_number": "254712345678"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["status"] == "QUEUED"
    assert r.json()["amount"] == 1500


def test_topup_validates_body(client, admin_headers):
    assert client.post(f"{URL}/topup", json={"amount": 0, "phone_number": "0712345678"}, headers=admin_headers).status_code == 422
    assert client.post(f"{URL}/topup", json={"amount": 10, "phone_number": "555"}, headers=admin_headers).status_code == 422


def test_topup_gateway_error_is_502(client, admin_headers, gateway, monkeypatch):
    def boom(*, amount, phone_number):
        raise GatewayUnavailable("PayHero API error (500)", status_code=500)

    monkeypatch.setattr(gateway, "topup", boom)
    r = client.post(f"{URL}/topup", json={"amount": 10, "phone_number": "0712345678"}, headers=admin_headers)
    assert r.status_code == 502


def test_gateway_without_wallet_ops_is_501(app, client, admin_headers):
    app.dependency_overrides[get_payout_gateway] = lambda: _BalanceOnlyGateway()

    assert client.get(f"{URL}/balance", headers=admin_headers).status_code == 501
    assert client.get(f"{URL}/transactions", headers=admin_headers).status_code == 501
