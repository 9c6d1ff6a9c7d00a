# app/workers/payout_runner.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from app.payouts.calculator import compute_payout
from app.payouts.eligibility import SUNDAY, is_due
from app.payouts.errors import GatewayUnavailable, InsufficientFunds, PayoutRunAborted, PersistenceError
from app.payouts.model import (
    OUTCOME_FAILED,
    OUTCOME_INELIGIBLE,
    OUTCOME_INSUFFICIENT,
    OUTCOME_PAID,
    OUTCOME_ZERO,
    PayoutConfig,
    PayoutDecision,
    RunningBalance,
    RunSummary,
)
from app.payouts.repository import BeneficiaryStore
from app.providers.base import DisbursementGateway, DisbursementReceipt, WithdrawalRequest
from services.idempotency import withdrawal_reference
from services.metrics import increment_gateway_error, increment_payout_outcome, increment_payout_run
from services.observability import request_id_or_dash
from services.redaction import mask_phone

logger = logging.getLogger("payouts.runner")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _WithdrawalFailed(Exception):
    def __init__(self, decision: PayoutDecision, cause: GatewayUnavailable):
        super().__init__(str(cause))
        self.decision = decision
        self.cause = cause


def _withdraw(gateway: DisbursementGateway, request: WithdrawalRequest) -> DisbursementReceipt:
    receipt = gateway.withdraw(request)
    if not receipt.ok:
        raise GatewayUnavailable(f"Withdrawal rejected by gateway reference={request.reference}")
    return receipt


class PayoutRunner:
    """
    One sweep of the payments wallet.

    The balance is fetched once. Beneficiaries are processed strictly in
    store order, each share computed against what is left after the ones
    before it. The first gateway error stops the run.
    """

    def __init__(
        self,
        gateway: DisbursementGateway,
        store: BeneficiaryStore,
        *,
        weekly_anchor: int = SUNDAY,
        tz: str = "UTC",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.gateway = gateway
        self.store = store
        self.weekly_anchor = weekly_anchor
        self.tz = ZoneInfo(tz)
        self.clock = clock or _utcnow

    def run(self, run_at: Optional[datetime] = None) -> RunSummary:
        run_at = run_at or self.clock()
        today = run_at.astimezone(self.tz).date() if run_at.tzinfo else run_at.date()

        try:
            balance = RunningBalance(self.gateway.get_balance())
        except GatewayUnavailable as exc:
            increment_gateway_error("balance")
            increment_payout_run("aborted")
            logger.error("payout run aborted: balance fetch failed err=%s request_id=%s", exc, request_id_or_dash())
            summary = RunSummary(run_at=run_at, initial_balance=Decimal("0"), final_balance=Decimal("0"))
            raise PayoutRunAborted("balance", exc, summary) from exc

        summary = RunSummary(run_at=run_at, initial_balance=balance.initial, final_balance=balance.current)
        logger.info(
            "payout run started run_at=%s today=%s balance=%s request_id=%s",
            run_at.isoformat(),
            today.isoformat(),
            balance.initial,
            request_id_or_dash(),
        )

        for config in self.store.list_active():
            # list_active is active-only; an inactive row must never produce a decision
            if not config.is_active:
                continue

            summary.evaluated += 1
            try:
                decision = self._process(config, today=today, run_at=run_at, balance=balance)
            except _WithdrawalFailed as failed:
                exc = failed.cause
                summary.decisions.append(failed.decision)
                summary.final_balance = balance.current
                increment_gateway_error("withdraw")
                increment_payout_outcome(OUTCOME_FAILED)
                increment_payout_run("aborted")
                logger.error(
                    "payout run aborted at beneficiary=%s err=%s paid_so_far=%s",
                    config.id,
                    exc,
                    summary.paid,
                )
                raise PayoutRunAborted("withdraw", exc, summary, beneficiary_id=config.id) from exc

            summary.decisions.append(decision)
            increment_payout_outcome(decision.outcome)
            if decision.outcome == OUTCOME_PAID:
                summary.paid += 1
                if not decision.recorded:
                    summary.unrecorded += 1
            elif decision.outcome == OUTCOME_INELIGIBLE:
                summary.skipped_ineligible += 1
            elif decision.outcome == OUTCOME_INSUFFICIENT:
                summary.skipped_insufficient += 1
            elif decision.outcome == OUTCOME_ZERO:
                summary.skipped_zero += 1

        summary.final_balance = balance.current
        increment_payout_run("success")
        logger.info(
            "payout run finished evaluated=%s paid=%s ineligible=%s insufficient=%s zero=%s final_balance=%s",
            summary.evaluated,
            summary.paid,
            summary.skipped_ineligible,
            summary.skipped_insufficient,
            summary.skipped_zero,
            summary.final_balance,
        )
        return summary

    def _process(self, config: PayoutConfig, *, today, run_at: datetime, balance: RunningBalance) -> PayoutDecision:
        if not is_due(config.payout_frequency, today, self.weekly_anchor):
            logger.debug("beneficiary=%s not due frequency=%s", config.id, config.payout_frequency)
            return PayoutDecision(beneficiary_id=config.id, eligible=False, outcome=OUTCOME_INELIGIBLE)

        quote = compute_payout(balance.current, config.payout_percentage)
        decision = PayoutDecision(
            beneficiary_id=config.id,
            eligible=True,
            gross_payout=quote.gross_payout,
            fee=quote.fee,
            total_deduction=quote.total_deduction,
        )

        if quote.is_zero:
            logger.info("beneficiary=%s share rounds to 0 at balance=%s; skipping", config.id, balance.current)
            decision.outcome = OUTCOME_ZERO
            return decision

        if not balance.covers(quote.total_deduction):
            logger.warning(
                "insufficient balance for beneficiary=%s required=%s available=%s",
                config.id,
                quote.total_deduction,
                balance.current,
            )
            decision.outcome = OUTCOME_INSUFFICIENT
            return decision

        decision.sufficient = True
        decision.reference = withdrawal_reference(config.id, run_at)
        logger.info(
            "processing payout beneficiary=%s payout=%s fee=%s total=%s reference=%s",
            config.id,
            quote.gross_payout,
            quote.fee,
            quote.total_deduction,
            decision.reference,
        )

        try:
            receipt = _withdraw(
                self.gateway,
                WithdrawalRequest(reference=decision.reference, amount=quote.gross_payout, destination=config.phone),
            )
        except GatewayUnavailable as exc:
            decision.outcome = OUTCOME_FAILED
            raise _WithdrawalFailed(decision, exc) from exc
        balance.deduct(quote.total_deduction)
        decision.outcome = OUTCOME_PAID
        decision.recorded = self._record_paid(config, run_at, receipt, quote.gross_payout)
        return decision

    def _record_paid(self, config: PayoutConfig, run_at: datetime, receipt: DisbursementReceipt, amount: int) -> bool:
        logger.info(
            "payout of KES %s initiated for beneficiary=%s to %s reference=%s",
            amount,
            config.id,
            mask_phone(config.phone),
            receipt.reference,
        )
        try:
            self.store.mark_paid(config.id, run_at)
        except PersistenceError:
            # not retried: the withdrawal already went out
            logger.critical(
                "PAYOUT SENT BUT NOT RECORDED beneficiary=%s reference=%s amount=%s",
                config.id,
                receipt.reference,
                amount,
                exc_info=True,
            )
            return False
        return True


def process_single_payout(
    gateway: DisbursementGateway,
    store: BeneficiaryStore,
    config: PayoutConfig,
    *,
    run_at: Optional[datetime] = None,
) -> dict:
    """
    Admin-triggered payout for one beneficiary, outside the schedule.

    Uses a fresh balance, skips the eligibility check and raises
    InsufficientFunds instead of skipping.
    """
    run_at = run_at or _utcnow()
    available = RunningBalance(gateway.get_balance())
    quote = compute_payout(available.current, config.payout_percentage)
    logger.info(
        "manual payout beneficiary=%s balance=%s payout=%s fee=%s",
        config.id,
        available.current,
        quote.gross_payout,
        quote.fee,
    )

    if quote.is_zero or not available.covers(quote.total_deduction):
        increment_payout_outcome(OUTCOME_INSUFFICIENT, trigger="manual")
        raise InsufficientFunds(required=max(quote.total_deduction, 1), available=available.current)

    reference = withdrawal_reference(config.id, run_at, prefix="manual_payout")
    receipt = _withdraw(
        gateway,
        WithdrawalRequest(reference=reference, amount=quote.gross_payout, destination=config.phone),
    )
    available.deduct(quote.total_deduction)
    increment_payout_outcome(OUTCOME_PAID, trigger="manual")

    recorded = True
    try:
        store.mark_paid(config.id, run_at)
    except PersistenceError:
        logger.critical(
            "MANUAL PAYOUT SENT BUT NOT RECORDED beneficiary=%s reference=%s amount=%s",
            config.id,
            reference,
            quote.gross_payout,
            exc_info=True,
        )
        recorded = False

    return {
        "reference": reference,
        "amount": quote.gross_payout,
        "fee": quote.fee,
        "total_deduction": quote.total_deduction,
        "recorded": recorded,
        "provider_ref": receipt.provider_ref,
    }
