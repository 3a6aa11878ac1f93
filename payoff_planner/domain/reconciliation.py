"""Overlay real payments on a simulated payoff schedule"""

from collections import defaultdict
from decimal import Decimal
from typing import Dict, List, Sequence, Tuple

from payoff_planner.domain.models import (
    ActualPayment,
    CalculationReport,
    Debt,
    DebtStatus,
    PlanMonth,
    ReconciledPlan,
)
from payoff_planner.domain.money import ZERO, to_money
from payoff_planner.utils.date_utils import month_key

PLAN_ON_TRACK = "on_track"
PLAN_OUTDATED = "outdated"
PLAN_COMPLETE = "complete"

DEFAULT_PAID_TOLERANCE = Decimal("0.99")
DEFAULT_OUTDATED_TOLERANCE = Decimal("1000")


def _group_by_month(payments: Sequence[ActualPayment]) -> Dict[Tuple[int, int], List[ActualPayment]]:
    grouped: Dict[Tuple[int, int], List[ActualPayment]] = defaultdict(list)
    for payment in payments:
        grouped[month_key(payment.payment_date)].append(payment)
    return grouped


def mark_paid_months(
    report: CalculationReport,
    strategy: str,
    payments: Sequence[ActualPayment],
    paid_tolerance: Decimal = DEFAULT_PAID_TOLERANCE,
) -> List[PlanMonth]:
    """
    Match recorded payments to planned months by calendar month.

    A month counts as paid once the real payments in it reach
    `paid_tolerance` (99%) of the planned total, absorbing rounding.
    """
    by_month = _group_by_month(payments)
    months: List[PlanMonth] = []

    for detail in report.result_for(strategy).payment_schedule:
        plan_month = PlanMonth(detail=detail)
        in_month = by_month.get(month_key(detail.period))
        if in_month:
            paid = sum((p.amount for p in in_month), ZERO)
            plan_month.actual_paid_amount = to_money(paid)
            plan_month.payment_date = max(p.payment_date for p in in_month)
            plan_month.is_paid = paid >= detail.total_payment * paid_tolerance
        months.append(plan_month)

    return months


def rebuild_debt_statuses(report: CalculationReport, live_debts: Sequence[Debt]) -> List[DebtStatus]:
    """Starting balances from the report, current balances from the live debts"""
    live_by_id = {d.debt_id: d for d in live_debts}
    statuses = []
    for initial in report.debt_statuses:
        live = live_by_id.get(initial.debt_id)
        statuses.append(
            DebtStatus(
                debt_id=initial.debt_id,
                debt_name=initial.debt_name,
                starting_balance=initial.starting_balance,
                current_balance=to_money(live.balance) if live else ZERO,
            )
        )
    return statuses


def reconcile_plan(
    report: CalculationReport,
    strategy: str,
    payments: Sequence[ActualPayment],
    live_debts: Sequence[Debt],
    paid_tolerance: Decimal = DEFAULT_PAID_TOLERANCE,
    outdated_tolerance: Decimal = DEFAULT_OUTDATED_TOLERANCE,
) -> ReconciledPlan:
    """
    Compute live plan status for a stored report.

    Requirements:
    - The first unpaid month is the plan's current position
    - Expected balance at that position: beginning debt for month 1,
      otherwise the previous month's planned ending balance
    - Current total debt always comes from the live debts, not the schedule
    - Outdated when live and expected balances differ by more than
      `outdated_tolerance`
    - Complete when every month is paid or nothing is owed any more
    """
    months = mark_paid_months(report, strategy, payments, paid_tolerance)

    current_index = next((i for i, m in enumerate(months) if not m.is_paid), None)
    if current_index is None:
        current_month = None
        expected_balance = months[-1].detail.ending_balance if months else ZERO
    else:
        current_month = months[current_index].detail.month
        expected_balance = (
            report.beginning_debt if current_index == 0 else months[current_index - 1].detail.ending_balance
        )

    current_total_debt = to_money(sum((d.balance for d in live_debts), ZERO))
    is_outdated = abs(current_total_debt - expected_balance) > outdated_tolerance

    if current_total_debt <= 0 or (months and current_index is None):
        status = PLAN_COMPLETE
    elif is_outdated:
        status = PLAN_OUTDATED
    else:
        status = PLAN_ON_TRACK

    return ReconciledPlan(
        report_id=report.report_id,
        strategy=strategy,
        extra_payment=report.extra_payment,
        beginning_debt=report.beginning_debt,
        months=months,
        current_month=current_month,
        expected_balance=expected_balance,
        current_total_debt=current_total_debt,
        debt_statuses=rebuild_debt_statuses(report, live_debts),
        is_plan_outdated=is_outdated,
        status=status,
    )
