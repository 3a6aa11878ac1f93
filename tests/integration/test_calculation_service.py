"""Integration tests for the calculation orchestrator against SQLite"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from payoff_planner.domain.exceptions import (
    InsufficientPaymentError,
    NoDebtsError,
    ReportNotFoundError,
    UpstreamUnavailableError,
)
from payoff_planner.domain.fingerprint import scenario_fingerprint
from payoff_planner.domain.simulation import simulate_payoff
from payoff_planner.domain.strategies import AVALANCHE, SNOWBALL, order_for_avalanche, order_for_snowball
from payoff_planner.infrastructure.database.models import CalculationReportRecord
from payoff_planner.infrastructure.database.repositories import (
    DatabaseDebtSource,
    DebtRepository,
    ReportRepository,
)
from payoff_planner.services.calculation import CalculationService, build_report


class ExplodingEventSink:
    def publish(self, event):
        raise RuntimeError("webhook queue full")


@pytest.fixture
def user_with_debts(add_debt):
    add_debt("user_1", "Credit Card", "3000", "24", "90")
    add_debt("user_1", "Car Loan", "8000", "7", "200")
    add_debt("user_1", "Store Card", "600", "18", "30")
    return "user_1"


async def test_calculate_stores_report_and_publishes_event(calculation_service, event_sink, user_with_debts):
    report_id = await calculation_service.calculate(user_with_debts, Decimal("150"))

    report = calculation_service.get_report(user_with_debts, report_id)
    assert report.report_id == report_id
    assert report.beginning_debt == Decimal("11600.00")
    assert report.extra_payment == Decimal("150")
    assert report.snowball.strategy_name == SNOWBALL
    assert report.avalanche.strategy_name == AVALANCHE
    assert report.avalanche.total_interest_paid <= report.snowball.total_interest_paid
    assert report.recommended_strategy == AVALANCHE
    assert report.recommendation.startswith("You can save a total of ")
    assert report.current_total_debt == report.beginning_debt
    assert [s.debt_name for s in report.debt_statuses] == ["Credit Card", "Car Loan", "Store Card"]

    assert len(event_sink.events) == 1
    assert event_sink.events[0].report_id == report_id
    assert event_sink.events[0].total_debt == Decimal("11600.00")


async def test_identical_scenario_returns_cached_report(calculation_service, event_sink, db, user_with_debts):
    first = await calculation_service.calculate(user_with_debts, Decimal("150"))
    second = await calculation_service.calculate(user_with_debts, Decimal("150.00"))

    assert first == second
    assert db.query(CalculationReportRecord).count() == 1
    assert len(event_sink.events) == 1


async def test_different_extra_payment_is_a_new_report(calculation_service, db, user_with_debts):
    first = await calculation_service.calculate(user_with_debts, Decimal("150"))
    second = await calculation_service.calculate(user_with_debts, Decimal("200"))

    assert first != second
    assert db.query(CalculationReportRecord).count() == 2


async def test_no_debts(calculation_service, event_sink):
    with pytest.raises(NoDebtsError):
        await calculation_service.calculate("user_without_debts", Decimal("100"))

    assert event_sink.events == []


async def test_paid_off_debts_do_not_count(calculation_service, add_debt):
    add_debt("user_2", "Old Card", "0", "20", "50")

    with pytest.raises(NoDebtsError):
        await calculation_service.calculate("user_2", Decimal("0"))


async def test_insufficient_payment_stores_nothing(calculation_service, event_sink, db, add_debt):
    add_debt("user_3", "Personal Loan", "10000", "20", "50")

    with pytest.raises(InsufficientPaymentError) as exc_info:
        await calculation_service.calculate("user_3", Decimal("0"))

    assert exc_info.value.deficit == Decimal("116.67")
    assert db.query(CalculationReportRecord).count() == 0
    assert event_sink.events == []


async def test_upstream_failure_propagates(db, event_sink, failing_debt_source):
    service = CalculationService(failing_debt_source, ReportRepository(db), event_sink)

    with pytest.raises(UpstreamUnavailableError):
        await service.calculate("user_1", Decimal("100"))

    assert db.query(CalculationReportRecord).count() == 0


async def test_failing_event_sink_does_not_fail_calculation(db, user_with_debts):
    service = CalculationService(DatabaseDebtSource(db), ReportRepository(db), ExplodingEventSink())

    report_id = await service.calculate(user_with_debts, Decimal("150"))

    assert service.get_report(user_with_debts, report_id) is not None


async def test_concurrent_insert_returns_winner_id(db, user_with_debts):
    """Two reports for the same scenario: the second insert yields the first id"""
    debts = DebtRepository(db).get_active_debts(user_with_debts)
    scenario_hash = scenario_fingerprint(user_with_debts, Decimal("150"), debts)

    def make_report():
        snowball = simulate_payoff(debts, Decimal("150"), order_for_snowball, SNOWBALL)
        avalanche = simulate_payoff(debts, Decimal("150"), order_for_avalanche, AVALANCHE)
        return build_report(user_with_debts, debts, Decimal("150"), snowball, avalanche, scenario_hash)

    reports = ReportRepository(db)
    winner, loser = make_report(), make_report()

    assert reports.insert(winner) == winner.report_id
    assert reports.insert(loser) == winner.report_id
    assert db.query(CalculationReportRecord).count() == 1


async def test_report_is_scoped_to_user(calculation_service, user_with_debts):
    report_id = await calculation_service.calculate(user_with_debts, Decimal("150"))

    with pytest.raises(ReportNotFoundError):
        calculation_service.get_report("someone_else", report_id)

    with pytest.raises(ReportNotFoundError):
        calculation_service.get_report(user_with_debts, uuid.uuid4())


async def test_history_newest_first(calculation_service, db, user_with_debts):
    older = await calculation_service.calculate(user_with_debts, Decimal("100"))
    newer = await calculation_service.calculate(user_with_debts, Decimal("300"))

    # Make the ordering independent of clock resolution
    record = db.query(CalculationReportRecord).filter(CalculationReportRecord.id == older).one()
    record.created_at = datetime.now(timezone.utc) - timedelta(days=1)
    db.commit()

    history = calculation_service.get_history(user_with_debts)

    assert [item.report_id for item in history] == [newer, older]
    assert history[0].extra_payment == Decimal("300")
    assert history[0].total_debt == Decimal("11600.00")
    assert history[0].interest_saved >= 0
    assert history[0].recommended_payoff_date.endswith("Months)")
    assert calculation_service.get_history("someone_else") == []
