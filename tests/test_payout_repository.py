from __future__ import annotations

import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal

import psycopg2
import pytest

from app.payouts.errors import PersistenceError
from app.payouts.repository import PayoutConfigRepository

CONFIG_ID = str(uuid.uuid4())
PAID_AT = datetime(2026, 12, 1, 3, 0, tzinfo=timezone.utc)


class _FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.rowcount = conn.rowcount

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self.conn.executed.append((" ".join(sql.split()), params))
        if self.conn.error:
            raise self.conn.error

    def fetchall(self):
        return list(self.conn.rows)

    def fetchone(self):
        return self.conn.rows[0] if self.conn.rows else None


class _FakeConn:
    def __init__(self, rows=(), rowcount=1, error=None):
        self.rows = list(rows)
        self.rowcount = rowcount
        self.error = error
        self.executed: list[tuple[str, object]] = []

    def cursor(self, cursor_factory=None):
        return _FakeCursor(self)


def _repo(conn) -> PayoutConfigRepository:
    @contextmanager
    def factory():
        yield conn

    return PayoutConfigRepository(conn_factory=factory)


def _row(**overrides):
    row = {
        "id": CONFIG_ID,
        "name": "A",
        "phone": "0712345678",
        "payout_percentage": Decimal("60.00"),
        "payout_frequency": "monthly",
        "is_active": True,
        "last_payout_date": None,
        "created_at": PAID_AT,
        "updated_at": PAID_AT,
    }
    row.update(overrides)
    return row


def test_list_active_orders_by_creation():
    conn = _FakeConn(rows=[_row()])

    configs = _repo(conn).list_active()

    sql, _ = conn.executed[0]
    assert "WHERE is_active = true" in sql
    assert "ORDER BY created_at ASC, id ASC" in sql
    assert configs[0].id == CONFIG_ID
    assert configs[0].payout_percentage == Decimal("60.00")


def test_mark_paid_updates_last_payout_date():
    conn = _FakeConn(rowcount=1)

    _repo(conn).mark_paid(CONFIG_ID, PAID_AT)

    sql, params = conn.executed[0]
    assert sql.startswith("UPDATE app.payout_configs SET last_payout_date = %s")
    assert params == (PAID_AT, CONFIG_ID)


def test_mark_paid_db_error_is_persistence_error():
    conn = _FakeConn(error=psycopg2.OperationalError("connection lost"))

    with pytest.raises(PersistenceError) as info:
        _repo(conn).mark_paid(CONFIG_ID, PAID_AT)

    assert isinstance(info.value.__cause__, psycopg2.OperationalError)


def test_mark_paid_missing_row_is_persistence_error():
    with pytest.raises(PersistenceError):
        _repo(_FakeConn(rowcount=0)).mark_paid(CONFIG_ID, PAID_AT)


def test_non_uuid_ids_short_circuit():
    conn = _FakeConn()
    repo = _repo(conn)

    assert repo.get("not-a-uuid") is None
    assert repo.delete("not-a-uuid") is False
    assert conn.executed == []


def test_active_total_defaults_to_zero():
    conn = _FakeConn(rows=[(0,)])
    assert _repo(conn).active_percentage_total() == Decimal("0")
