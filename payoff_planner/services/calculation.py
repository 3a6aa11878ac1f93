"""Calculation orchestrator - builds and caches Snowball vs Avalanche reports"""

import logging
import time
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from payoff_planner.config import settings
from payoff_planner.domain.exceptions import (
    InsufficientPaymentError,
    NoDebtsError,
    ReportNotFoundError,
    RunawaySimulationError,
    UpstreamUnavailableError,
)
from payoff_planner.domain.fingerprint import scenario_fingerprint
from payoff_planner.domain.models import (
    CalculationHistoryItem,
    CalculationReport,
    Debt,
    DebtStatus,
    ReportCreatedEvent,
    StrategyResult,
)
from payoff_planner.domain.money import ZERO, to_money
from payoff_planner.domain.ports import DebtSource, EventSink, ReportStore
from payoff_planner.domain.simulation import simulate_payoff
from payoff_planner.domain.strategies import AVALANCHE, SNOWBALL, order_for_avalanche, order_for_snowball
from payoff_planner.infrastructure.observability.logging import log_calculation
from payoff_planner.infrastructure.observability.metrics import (
    event_publish_failures_counter,
    record_calculation,
    upstream_failures_counter,
)


def build_report(
    user_id: str,
    debts: Sequence[Debt],
    extra_payment: Decimal,
    snowball: StrategyResult,
    avalanche: StrategyResult,
    scenario_hash: str,
) -> CalculationReport:
    """
    Assemble the comparison report.

    The recommendation is the strategy with less total interest; a tie goes
    to Snowball (quick wins at no extra cost).
    """
    beginning_debt = to_money(sum((d.balance for d in debts), ZERO))
    difference = snowball.total_interest_paid - avalanche.total_interest_paid
    recommended = SNOWBALL if difference <= 0 else AVALANCHE
    recommendation = (
        f"You can save a total of {abs(difference):,.2f} in interest using the {recommended} method."
    )

    return CalculationReport(
        report_id=uuid.uuid4(),
        user_id=user_id,
        beginning_debt=beginning_debt,
        snowball=snowball,
        avalanche=avalanche,
        recommended_strategy=recommended,
        recommendation=recommendation,
        extra_payment=extra_payment,
        scenario_hash=scenario_hash,
        created_at=datetime.now(timezone.utc),
        current_total_debt=beginning_debt,
        debt_statuses=[
            DebtStatus(
                debt_id=d.debt_id,
                debt_name=d.name,
                starting_balance=to_money(d.starting_balance),
                current_balance=to_money(d.balance),
            )
            for d in debts
        ],
    )


class CalculationService:
    """Runs both strategies, deduplicates identical scenarios and stores reports"""

    def __init__(
        self,
        debt_source: DebtSource,
        reports: ReportStore,
        events: Optional[EventSink] = None,
        max_months: Optional[int] = None,
    ):
        self.debt_source = debt_source
        self.reports = reports
        self.events = events
        self.max_months = max_months or settings.max_simulation_months

    async def calculate(self, user_id: str, extra_monthly_payment: Decimal) -> uuid.UUID:
        """
        Calculate (or reuse) the comparison report for the user's current debts.

        Flow:
        1. Fetch current debts from the debt source
        2. Fingerprint the scenario; an existing report is returned as is
        3. Simulate Snowball and Avalanche on the same snapshot
        4. Persist the report and publish a report-created event

        Raises:
            NoDebtsError: nothing to simulate
            InsufficientPaymentError / RunawaySimulationError: plan cannot converge
            UpstreamUnavailableError: debt source or report store failed
        """
        start_time = time.time()
        extra_payment = Decimal(extra_monthly_payment)

        try:
            debts = await self.debt_source.list_active_debts(user_id)
        except UpstreamUnavailableError:
            upstream_failures_counter.inc()
            record_calculation("upstream_error")
            raise

        if not debts:
            record_calculation("no_debts")
            raise NoDebtsError("No debts found to calculate.")

        scenario_hash = scenario_fingerprint(user_id, extra_payment, debts)

        try:
            existing = self.reports.get_by_fingerprint(user_id, scenario_hash)
        except SQLAlchemyError as e:
            upstream_failures_counter.inc()
            record_calculation("upstream_error")
            raise UpstreamUnavailableError(f"Report store unavailable: {e}") from e

        if existing is not None:
            record_calculation("cached")
            log_calculation(user_id, str(existing.report_id), "cached", (time.time() - start_time) * 1000)
            return existing.report_id

        today = date.today()
        try:
            snowball = simulate_payoff(
                debts, extra_payment, order_for_snowball, SNOWBALL, start_date=today, max_months=self.max_months
            )
            avalanche = simulate_payoff(
                debts, extra_payment, order_for_avalanche, AVALANCHE, start_date=today, max_months=self.max_months
            )
        except InsufficientPaymentError as e:
            record_calculation("insufficient_payment")
            logging.warning(f"Insufficient payment: {e}", extra={"user_id": user_id, "deficit": str(e.deficit)})
            raise
        except RunawaySimulationError as e:
            record_calculation("runaway")
            logging.warning(f"Runaway simulation: {e}", extra={"user_id": user_id})
            raise

        report = build_report(user_id, debts, extra_payment, snowball, avalanche, scenario_hash)

        try:
            report_id = self.reports.insert(report)
        except SQLAlchemyError as e:
            upstream_failures_counter.inc()
            record_calculation("upstream_error")
            raise UpstreamUnavailableError(f"Report store unavailable: {e}") from e

        if report_id != report.report_id:
            # Lost an insert race for the same scenario
            record_calculation("cached")
            log_calculation(user_id, str(report_id), "cached", (time.time() - start_time) * 1000)
            return report_id

        self._publish(
            ReportCreatedEvent(
                user_id=user_id,
                report_id=report_id,
                total_debt=report.beginning_debt,
                created_at=report.created_at,
            )
        )

        record_calculation("created", {SNOWBALL: snowball.total_months, AVALANCHE: avalanche.total_months})
        log_calculation(
            user_id,
            str(report_id),
            "created",
            (time.time() - start_time) * 1000,
            recommended_strategy=report.recommended_strategy,
        )
        return report_id

    def _publish(self, event: ReportCreatedEvent) -> None:
        if self.events is None:
            return
        try:
            self.events.publish(event)
        except Exception as e:
            # Notifications are best-effort and never fail the calculation
            event_publish_failures_counter.inc()
            logging.error(f"Event publish failed: {e}", extra={"report_id": str(event.report_id)})

    def get_report(self, user_id: str, report_id: uuid.UUID) -> CalculationReport:
        report = self.reports.get_by_id(user_id, report_id)
        if report is None:
            raise ReportNotFoundError("Calculation report not found or you do not have permission.")
        return report

    def get_history(self, user_id: str) -> List[CalculationHistoryItem]:
        """Most recent reports first, bounded by the configured history limit"""
        history = []
        for report in self.reports.list_recent_by_user(user_id, limit=settings.history_limit):
            recommended = report.result_for(report.recommended_strategy)
            history.append(
                CalculationHistoryItem(
                    report_id=report.report_id,
                    created_at=report.created_at,
                    total_debt=report.beginning_debt,
                    extra_payment=report.extra_payment,
                    recommended_strategy=report.recommended_strategy,
                    recommended_payoff_date=recommended.payoff_date,
                    interest_saved=abs(report.snowball.total_interest_paid - report.avalanche.total_interest_paid),
                )
            )
        return history
