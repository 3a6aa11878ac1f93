"""Active plan tracking - reconciles a stored schedule with real payments"""

import logging
import uuid
from contextlib import contextmanager
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from payoff_planner.config import settings
from payoff_planner.domain.exceptions import PlanNotFoundError, ReportNotFoundError, UpstreamUnavailableError
from payoff_planner.domain.models import ActivePlan, ReconciledPlan
from payoff_planner.domain.ports import DebtSource, PaymentStore, PlanStore, ReportStore
from payoff_planner.domain.reconciliation import reconcile_plan
from payoff_planner.domain.strategies import resolve_strategy
from payoff_planner.infrastructure.observability.metrics import plan_status_counter, upstream_failures_counter
from payoff_planner.services.calculation import CalculationService


@contextmanager
def _store_errors_as_upstream(store: str):
    try:
        yield
    except SQLAlchemyError as e:
        upstream_failures_counter.inc()
        raise UpstreamUnavailableError(f"{store} store unavailable: {e}") from e


class PlanService:
    """Activates, reconciles and recalculates a user's active plan"""

    def __init__(
        self,
        plans: PlanStore,
        reports: ReportStore,
        payments: PaymentStore,
        debt_source: DebtSource,
        calculation_service: CalculationService,
        paid_tolerance: Optional[Decimal] = None,
        outdated_tolerance: Optional[Decimal] = None,
    ):
        self.plans = plans
        self.reports = reports
        self.payments = payments
        self.debt_source = debt_source
        self.calculation_service = calculation_service
        self.paid_tolerance = paid_tolerance if paid_tolerance is not None else settings.paid_month_tolerance
        self.outdated_tolerance = (
            outdated_tolerance if outdated_tolerance is not None else settings.plan_outdated_tolerance
        )

    def activate_plan(self, user_id: str, report_id: uuid.UUID, strategy: str) -> ActivePlan:
        """Make a report + strategy the user's only active plan"""
        resolve_strategy(strategy)

        with _store_errors_as_upstream("Plan"):
            if self.reports.get_by_id(user_id, report_id) is None:
                raise ReportNotFoundError("Report not found.")
            plan = self.plans.activate(user_id, report_id, strategy)

        logging.info(
            "Plan activated",
            extra={"user_id": user_id, "report_id": str(report_id), "strategy": strategy},
        )
        return plan

    def _require_active_plan(self, user_id: str) -> ActivePlan:
        with _store_errors_as_upstream("Plan"):
            plan = self.plans.get_active(user_id)
        if plan is None:
            raise PlanNotFoundError("Active plan not found.")
        return plan

    async def get_active_plan(self, user_id: str) -> ReconciledPlan:
        """
        Reconcile the active plan with recorded payments and live balances.

        The reconciled live balances are written back onto the report.
        """
        plan = self._require_active_plan(user_id)
        with _store_errors_as_upstream("Report"):
            report = self.reports.get_by_id(user_id, plan.report_id)
        if report is None:
            raise ReportNotFoundError("Active plan report not found.")

        with _store_errors_as_upstream("Payment"):
            payments = self.payments.list_by_report_id(plan.report_id)

        live_debts = await self.debt_source.list_active_debts(user_id)

        reconciled = reconcile_plan(
            report,
            plan.strategy,
            payments,
            live_debts,
            paid_tolerance=self.paid_tolerance,
            outdated_tolerance=self.outdated_tolerance,
        )

        with _store_errors_as_upstream("Report"):
            self.reports.update_live_status(report.report_id, reconciled.current_total_debt, reconciled.debt_statuses)
        plan_status_counter.labels(status=reconciled.status).inc()

        if reconciled.is_plan_outdated:
            logging.info(
                "Plan outdated",
                extra={
                    "user_id": user_id,
                    "report_id": str(report.report_id),
                    "expected_balance": str(reconciled.expected_balance),
                    "current_total_debt": str(reconciled.current_total_debt),
                },
            )

        return reconciled

    async def recalculate(self, user_id: str) -> uuid.UUID:
        """
        Re-run the calculation for current debts with the plan's extra payment.

        The plan keeps its strategy and is repointed to the resulting report
        (a cached one when nothing changed). Non-converging plans propagate
        unchanged so the caller sees the deficit.
        """
        plan = self._require_active_plan(user_id)
        with _store_errors_as_upstream("Report"):
            report = self.reports.get_by_id(user_id, plan.report_id)
        if report is None:
            raise ReportNotFoundError("Active plan report not found.")

        new_report_id = await self.calculation_service.calculate(user_id, report.extra_payment)
        with _store_errors_as_upstream("Plan"):
            self.plans.repoint(plan.plan_id, new_report_id)

        logging.info(
            "Plan recalculated",
            extra={"user_id": user_id, "old_report_id": str(plan.report_id), "report_id": str(new_report_id)},
        )
        return new_report_id
