"""Unit tests for plan reconciliation against real payments"""

from datetime import date
from decimal import Decimal

import pytest
from payoff_planner.domain.fingerprint import scenario_fingerprint
from payoff_planner.domain.models import ActualPayment, Debt
from payoff_planner.domain.reconciliation import (
    PLAN_COMPLETE,
    PLAN_ON_TRACK,
    PLAN_OUTDATED,
    mark_paid_months,
    rebuild_debt_statuses,
    reconcile_plan,
)
from payoff_planner.domain.simulation import simulate_payoff
from payoff_planner.domain.strategies import AVALANCHE, SNOWBALL, order_for_avalanche, order_for_snowball
from payoff_planner.services.calculation import build_report


START = date(2026, 1, 15)


def card(balance: str = "100") -> Debt:
    return Debt(debt_id=1, name="Card", balance=Decimal(balance), interest_rate=Decimal("0"), min_payment=Decimal("50"))


@pytest.fixture
def report():
    """Two-month plan: 50 in February 2026 and 50 in March 2026"""
    debts = [card()]
    snowball = simulate_payoff(debts, Decimal("0"), order_for_snowball, SNOWBALL, start_date=START)
    avalanche = simulate_payoff(debts, Decimal("0"), order_for_avalanche, AVALANCHE, start_date=START)
    return build_report(
        "user_1", debts, Decimal("0"), snowball, avalanche, scenario_fingerprint("user_1", Decimal("0"), debts)
    )


def paid(amount: str, day: date) -> ActualPayment:
    return ActualPayment(debt_id=1, amount=Decimal(amount), payment_date=day)


def test_month_paid_at_99_percent(report):
    months = mark_paid_months(report, SNOWBALL, [paid("49.50", date(2026, 2, 3))])

    assert months[0].is_paid is True
    assert months[0].actual_paid_amount == Decimal("49.50")
    assert months[0].payment_date == date(2026, 2, 3)
    assert months[1].is_paid is False


def test_month_not_paid_below_99_percent(report):
    months = mark_paid_months(report, SNOWBALL, [paid("49.49", date(2026, 2, 3))])

    assert months[0].is_paid is False
    assert months[0].actual_paid_amount == Decimal("49.49")


def test_payments_in_same_month_are_summed(report):
    months = mark_paid_months(
        report,
        SNOWBALL,
        [paid("20", date(2026, 2, 3)), paid("30", date(2026, 2, 20))],
    )

    assert months[0].is_paid is True
    assert months[0].actual_paid_amount == Decimal("50.00")
    assert months[0].payment_date == date(2026, 2, 20)


def test_payments_outside_the_schedule_are_ignored(report):
    months = mark_paid_months(report, SNOWBALL, [paid("100", date(2025, 12, 1))])

    assert not any(m.is_paid for m in months)


def test_nothing_paid_starts_at_month_one(report):
    plan = reconcile_plan(report, SNOWBALL, [], [card("100")])

    assert plan.current_month == 1
    assert plan.expected_balance == Decimal("100.00")
    assert plan.current_total_debt == Decimal("100.00")
    assert plan.is_plan_outdated is False
    assert plan.status == PLAN_ON_TRACK


def test_expected_balance_follows_previous_month(report):
    plan = reconcile_plan(report, SNOWBALL, [paid("50", date(2026, 2, 3))], [card("50")])

    assert plan.current_month == 2
    assert plan.expected_balance == Decimal("50.00")
    assert plan.status == PLAN_ON_TRACK


def test_plan_outdated_when_live_balance_drifts(report):
    """Month 1 marked paid but the live balance never moved"""
    plan = reconcile_plan(
        report,
        SNOWBALL,
        [paid("50", date(2026, 2, 3))],
        [card("100")],
        outdated_tolerance=Decimal("10"),
    )

    assert plan.is_plan_outdated is True
    assert plan.status == PLAN_OUTDATED


def test_plan_complete_when_nothing_owed(report):
    plan = reconcile_plan(report, SNOWBALL, [], [])

    assert plan.current_total_debt == Decimal("0.00")
    assert plan.status == PLAN_COMPLETE
    assert plan.debt_statuses[0].is_paid_off is True


def test_plan_complete_when_every_month_paid(report):
    payments = [paid("50", date(2026, 2, 3)), paid("50", date(2026, 3, 3))]

    plan = reconcile_plan(report, SNOWBALL, payments, [])

    assert plan.current_month is None
    assert plan.expected_balance == Decimal("0.00")
    assert plan.status == PLAN_COMPLETE


def test_debt_statuses_use_live_balances(report):
    statuses = rebuild_debt_statuses(report, [card("40")])

    assert len(statuses) == 1
    assert statuses[0].starting_balance == Decimal("100.00")
    assert statuses[0].current_balance == Decimal("40.00")
    assert statuses[0].is_paid_off is False
