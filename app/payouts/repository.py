# app/payouts/repository.py
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Protocol

import psycopg2
from psycopg2.extras import RealDictCursor

from app.payouts.errors import PersistenceError
from db import get_conn
from app.payouts.model import PayoutConfig

_COLUMNS = """
  id::text AS id,
  name,
  phone,
  payout_percentage,
  payout_frequency,
  is_active,
  last_payout_date,
  created_at,
  updated_at
"""


class BeneficiaryStore(Protocol):
    def list_active(self) -> list[PayoutConfig]: ...
    def mark_paid(self, config_id: str, paid_at: datetime) -> None: ...


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def _row_to_config(row: dict[str, Any]) -> PayoutConfig:
    return PayoutConfig(
        id=str(row["id"]),
        name=row["name"],
        phone=row["phone"],
        payout_percentage=Decimal(str(row["payout_percentage"])),
        payout_frequency=row["payout_frequency"],
        is_active=bool(row["is_active"]),
        last_payout_date=row.get("last_payout_date"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


# ==========================================================
# Reads
# ==========================================================

def list_active_configs(conn) -> list[PayoutConfig]:
    # created_at, id is the payout priority when funds run short
    with conn.cursor(cursor_factory=RealDictCursor) as cur:
        cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM app.payout_configs
            WHERE is_active = true
            ORDER BY created_at ASC, id ASC
            """
        )
        return [_row_to_config(r) for r in cur.fetchall()]


def list_all_configs(conn) -> list[PayoutConfig]:
    with conn.cursor(cursor_factory=RealDictCursor) as cur:
        cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM app.payout_configs
            ORDER BY created_at DESC, id DESC
            """
        )
        return [_row_to_config(r) for r in cur.fetchall()]


def get_config(conn, config_id: str) -> Optional[PayoutConfig]:
    with conn.cursor(cursor_factory=RealDictCursor) as cur:
        cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM app.payout_configs
            WHERE id = %s::uuid
            LIMIT 1
            """,
            (config_id,),
        )
        row = cur.fetchone()
        return _row_to_config(row) if row else None


def active_percentage_total(conn) -> Decimal:
    with conn.cursor() as cur:
        cur.execute("SELECT COALESCE(SUM(payout_percentage), 0) FROM app.payout_configs WHERE is_active = true")
        return Decimal(str(cur.fetchone()[0]))


# ==========================================================
# Writes
# ==========================================================

def insert_config(
    conn,
    *,
    name: str,
    phone: str,
    payout_percentage: Decimal,
    payout_frequency: str,
    is_active: bool = True,
) -> PayoutConfig:
    with conn.cursor(cursor_factory=RealDictCursor) as cur:
        cur.execute(
            f"""
            INSERT INTO app.payout_configs (name, phone, payout_percentage, payout_frequency, is_active)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING {_COLUMNS}
            """,
            (name, phone, payout_percentage, payout_frequency, is_active),
        )
        return _row_to_config(cur.fetchone())


def delete_config(conn, config_id: str) -> bool:
    with conn.cursor() as cur:
        cur.execute("DELETE FROM app.payout_configs WHERE id = %s::uuid", (config_id,))
        return cur.rowcount > 0


def update_last_payout_date(conn, config_id: str, paid_at: datetime) -> bool:
    with conn.cursor() as cur:
        cur.execute(
            """
            UPDATE app.payout_configs
            SET last_payout_date = %s,
                updated_at = now()
            WHERE id = %s::uuid
            """,
            (paid_at, config_id),
        )
        return cur.rowcount > 0


class PayoutConfigRepository:
    """BeneficiaryStore backed by app.payout_configs."""

    def __init__(self, conn_factory=None):
        self._conn = conn_factory or get_conn

    def list_active(self) -> list[PayoutConfig]:
        with self._conn() as conn:
            return list_active_configs(conn)

    def list_all(self) -> list[PayoutConfig]:
        with self._conn() as conn:
            return list_all_configs(conn)

    def get(self, config_id: str) -> Optional[PayoutConfig]:
        if not _is_uuid(config_id):
            return None
        with self._conn() as conn:
            return get_config(conn, config_id)

    def active_percentage_total(self) -> Decimal:
        with self._conn() as conn:
            return active_percentage_total(conn)

    def create(self, **fields: Any) -> PayoutConfig:
        with self._conn() as conn:
            return insert_config(conn, **fields)

    def delete(self, config_id: str) -> bool:
        if not _is_uuid(config_id):
            return False
        with self._conn() as conn:
            return delete_config(conn, config_id)

    def mark_paid(self, config_id: str, paid_at: datetime) -> None:
        try:
            with self._conn() as conn:
                updated = update_last_payout_date(conn, config_id, paid_at)
        except psycopg2.Error as exc:
            raise PersistenceError(f"mark_paid failed for {config_id}: {type(exc).__name__}") from exc
        if not updated:
            raise PersistenceError(f"mark_paid matched no row for {config_id}")
