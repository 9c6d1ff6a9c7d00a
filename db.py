from __future__ import annotations

from contextlib import contextmanager
from typing import Optional

import psycopg2.extras
from psycopg2.pool import SimpleConnectionPool

from settings import settings

APPLICATION_NAME = "revshare_payouts"

_pool: Optional[SimpleConnectionPool] = None


def init_pool() -> SimpleConnectionPool:
    """Create the shared pool on first use. Raises if DATABASE_URL is empty."""
    global _pool
    if _pool is None:
        if not (settings.DATABASE_URL or "").strip():
            raise RuntimeError("DATABASE_URL is not set.")
        psycopg2.extras.register_uuid()
        _pool = SimpleConnectionPool(
            minconn=1,
            maxconn=settings.DB_POOL_MAX,
            dsn=settings.DATABASE_URL,
            connect_timeout=5,
            application_name=APPLICATION_NAME,
        )
    return _pool


def close_pool() -> None:
    global _pool
    if _pool:
        _pool.closeall()
        _pool = None


@contextmanager
def get_conn():
    """
    One pooled connection per unit of work.

    Commits when the block exits cleanly, rolls back and re-raises otherwise.
    """
    pool = init_pool()
    conn = pool.getconn()
    try:
        with conn.cursor() as cur:
            cur.execute("SET statement_timeout = %s;", (f"{settings.DB_STATEMENT_TIMEOUT_MS}ms",))
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        pool.putconn(conn)


def current_revision(conn) -> Optional[str]:
    """Alembic revision applied to this database, or None before the first migration."""
    with conn.cursor() as cur:
        cur.execute("SELECT to_regclass('public.alembic_version');")
        if not cur.fetchone()[0]:
            return None
        cur.execute("SELECT version_num FROM public.alembic_version LIMIT 1;")
        row = cur.fetchone()
        return row[0] if row else None
