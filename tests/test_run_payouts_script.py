from __future__ import annotations

from app.providers.mock import MockGateway
from scripts import run_payouts
from tests.conftest import InMemoryStore, make_config


def _patch(monkeypatch, gateway, store):
    monkeypatch.setattr(run_payouts, "get_gateway", lambda name=None: gateway)
    monkeypatch.setattr(run_payouts, "PayoutConfigRepository", lambda: store)
    monkeypatch.setattr(run_payouts.settings, "PAYOUT_TIMEZONE", "Africa/Nairobi", raising=False)


def test_dated_run_prints_summary(monkeypatch, capsys):
    gateway = MockGateway(balance=50000)
    store = InMemoryStore([make_config("A", 60, order=0), make_config("B", 50, order=1)])
    _patch(monkeypatch, gateway, store)

    assert run_payouts.main(["--date", "2026-12-01"]) == 0

    out = capsys.readouterr().out
    assert "initial=50000" in out
    assert "final=9915" in out
    assert "paid=2" in out
    assert [w.amount for w in gateway.withdrawals] == [30000, 9960]


def test_weekly_beneficiaries_wait_for_sunday(monkeypatch, capsys):
    gateway = MockGateway(balance=50000)
    _patch(monkeypatch, gateway, InMemoryStore([make_config("W", 10, frequency="weekly")]))

    assert run_payouts.main(["--date", "2026-10-19"]) == 0
    assert gateway.withdrawals == []

    assert run_payouts.main(["--date", "2026-10-25"]) == 0
    assert len(gateway.withdrawals) == 1


def test_aborted_run_exits_non_zero(monkeypatch, capsys):
    config = make_config("A", 10)
    gateway = MockGateway(balance=50000, fail_on=config.phone)
    _patch(monkeypatch, gateway, InMemoryStore([config]))

    assert run_payouts.main(["--date", "2026-12-01"]) == 1
    out = capsys.readouterr().out
    assert "stage=withdraw" in out
    assert f"beneficiary={config.id}" in out


def test_missing_gateway_exits_non_zero(monkeypatch, capsys):
    _patch(monkeypatch, None, InMemoryStore())
    assert run_payouts.main([]) == 1
    assert "no gateway configured" in capsys.readouterr().out
