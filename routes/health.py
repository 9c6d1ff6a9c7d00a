from __future__ import annotations

import os

from fastapi import APIRouter
from fastapi.responses import Response

from db import current_revision, get_conn
from services.metrics import render_prometheus
from settings import settings

router = APIRouter(tags=["health"])

EXPECTED_REVISION = "0001_create_payout_configs"


def _git_sha() -> str | None:
    return (os.getenv("GIT_SHA") or "").strip() or None


@router.get("/health")
def health():
    return {
        "ok": True,
        "env": settings.ENV,
        "gateway": settings.PAYOUT_GATEWAY,
        "git_sha": _git_sha(),
    }


@router.get("/readyz")
def readyz():
    revision = None
    try:
        with get_conn() as conn:
            revision = current_revision(conn)
        db_ok, db_error = True, None
    except Exception as exc:
        db_ok, db_error = False, f"{type(exc).__name__}: {exc}"

    migrated = revision == EXPECTED_REVISION
    return {
        "ready": db_ok and migrated,
        "db_ok": db_ok,
        "db_error": db_error,
        "revision": revision,
        "migrated": migrated,
    }


@router.get("/metrics")
def metrics():
    return Response(content=render_prometheus(), media_type="text/plain; version=0.0.4")
