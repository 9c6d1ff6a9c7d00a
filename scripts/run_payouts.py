from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, time, timezone
from zoneinfo import ZoneInfo

from app.payouts.errors import PayoutRunAborted
from app.payouts.repository import PayoutConfigRepository
from db import close_pool
from deps.payouts import build_runner
from app.providers.factory import get_gateway
from settings import settings


logger = logging.getLogger("payouts.cli")


def _run_at(date_arg: str | None) -> datetime:
    if not date_arg:
        return datetime.now(timezone.utc)
    day = datetime.strptime(date_arg, "%Y-%m-%d").date()
    # noon local time
    return datetime.combine(day, time(12, 0), tzinfo=ZoneInfo(settings.PAYOUT_TIMEZONE))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run one payout sweep in-process.")
    parser.add_argument("--date", help="Treat this day (YYYY-MM-DD) as today.")
    parser.add_argument("--gateway", choices=["payhero", "mock"], default=None)
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="%(levelname)s %(name)s: %(message)s")

    gateway = get_gateway(args.gateway)
    if gateway is None:
        print("no gateway configured")
        return 1

    runner = build_runner(gateway, PayoutConfigRepository())
    try:
        summary = runner.run(_run_at(args.date))
    except PayoutRunAborted as exc:
        print("run aborted:", f"stage={exc.stage}", f"beneficiary={exc.beneficiary_id}", f"err={exc.cause}")
        print("counts:", " ".join(f"{k}={v}" for k, v in exc.summary.counts().items()))
        return 1
    finally:
        close_pool()

    print("run_at:", summary.run_at.isoformat())
    print("balance:", f"initial={summary.initial_balance}", f"final={summary.final_balance}")
    print("counts:", " ".join(f"{k}={v}" for k, v in summary.counts().items()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
