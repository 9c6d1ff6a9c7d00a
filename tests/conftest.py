# tests/conftest.py

import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

from app.payouts.errors import PersistenceError
from app.payouts.model import PayoutConfig
from app.providers.mock import MockGateway
from deps.payouts import get_payout_gateway, get_payout_store
from main import create_app
from security import create_access_token
from services.metrics import reset_metrics
from settings import settings


CRON_SECRET = "test-cron-secret"

_BASE_CREATED_AT = datetime(2026, 1, 1, tzinfo=timezone.utc)


def make_config(
    name: str,
    percentage,
    *,
    frequency: str = "monthly",
    phone: Optional[str] = None,
    active: bool = True,
    config_id: Optional[str] = None,
    order: int = 0,
) -> PayoutConfig:
    return PayoutConfig(
        id=config_id or str(uuid.uuid4()),
        name=name,
        phone=phone or "07" + str(uuid.uuid4().int)[:8],
        payout_percentage=Decimal(str(percentage)),
        payout_frequency=frequency,
        is_active=active,
        created_at=_BASE_CREATED_AT + timedelta(minutes=order),
    )


class InMemoryStore:
    """BeneficiaryStore + admin repository surface, kept in a list in insertion order."""

    def __init__(self, configs=()):
        self.configs: list[PayoutConfig] = list(configs)
        self.mark_paid_calls: list[tuple[str, datetime]] = []
        self.fail_mark_paid: set[str] = set()

    def list_active(self):
        return [c for c in self.configs if c.is_active]

    def list_all(self):
        return list(reversed(self.configs))

    def get(self, config_id):
        return next((c for c in self.configs if c.id == config_id), None)

    def active_percentage_total(self):
        return sum((c.payout_percentage for c in self.configs if c.is_active), Decimal("0"))

    def create(self, **fields):
        config = make_config(
            fields["name"],
            fields["payout_percentage"],
            frequency=fields["payout_frequency"],
            phone=fields["phone"],
            active=fields.get("is_active", True),
            order=len(self.configs),
        )
        self.configs.append(config)
        return config

    def delete(self, config_id):
        before = len(self.configs)
        self.configs = [c for c in self.configs if c.id != config_id]
        return len(self.configs) < before

    def mark_paid(self, config_id, paid_at):
        self.mark_paid_calls.append((config_id, paid_at))
        if config_id in self.fail_mark_paid:
            raise PersistenceError(f"mark_paid failed for {config_id}")
        self.configs = [replace(c, last_payout_date=paid_at) if c.id == config_id else c for c in self.configs]


@pytest.fixture(autouse=True)
def _reset_metrics():
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture()
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture()
def gateway() -> MockGateway:
    return MockGateway(balance=Decimal("50000"))


@pytest.fixture()
def app(store, gateway, monkeypatch):
    monkeypatch.setattr(settings, "CRON_SECRET", CRON_SECRET, raising=False)
    monkeypatch.setattr(settings, "PAYOUT_TIMEZONE", "Africa/Nairobi", raising=False)
    monkeypatch.setattr(settings, "PAYOUT_WEEKLY_ANCHOR", 6, raising=False)
    application = create_app()
    application.dependency_overrides[get_payout_gateway] = lambda: gateway
    application.dependency_overrides[get_payout_store] = lambda: store
    return application


@pytest.fixture()
def client(app) -> TestClient:
    # Needed so tests can assert 500s instead of pytest re-raising server exceptions
    return TestClient(app, raise_server_exceptions=False)


def _auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def cron_headers() -> Dict[str, str]:
    return _auth_headers(CRON_SECRET)


@pytest.fixture()
def admin_headers() -> Dict[str, str]:
    return _auth_headers(create_access_token("admin-1", role="admin"))


@pytest.fixture()
def user_headers() -> Dict[str, str]:
    return _auth_headers(create_access_token("user-1", role="user"))


@pytest.fixture()
def fixed_now(monkeypatch):
    """Pin the runner clock; returns a setter taking an aware datetime."""

    def _set(when: datetime) -> datetime:
        monkeypatch.setattr("app.workers.payout_runner._utcnow", lambda: when)
        return when

    return _set
