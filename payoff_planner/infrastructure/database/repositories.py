"""Data access layer for debts, reports, plans and payments"""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from pydantic import TypeAdapter
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from payoff_planner.domain.exceptions import (
    DebtNotFoundError,
    DistributionAtomicityError,
    UpstreamUnavailableError,
)
from payoff_planner.domain.models import ActivePlan, ActualPayment, CalculationReport, Debt, DebtStatus
from payoff_planner.domain.money import ZERO
from payoff_planner.infrastructure.database.models import (
    ActualPaymentRecord,
    CalculationReportRecord,
    DebtRecord,
    UserActivePlanRecord,
)
from payoff_planner.utils.date_utils import add_months, month_start

_REPORT_ADAPTER = TypeAdapter(CalculationReport)


def _debt_from_record(record: DebtRecord) -> Debt:
    return Debt(
        debt_id=record.id,
        name=record.name,
        balance=Decimal(record.current_balance),
        interest_rate=Decimal(record.interest_rate),
        min_payment=Decimal(record.min_payment),
    )


def _report_from_record(record: CalculationReportRecord) -> CalculationReport:
    return _REPORT_ADAPTER.validate_python(record.report_data)


def _plan_from_record(record: UserActivePlanRecord) -> ActivePlan:
    return ActivePlan(
        plan_id=record.id,
        user_id=record.user_id,
        report_id=record.calculation_report_id,
        strategy=record.selected_strategy,
        activated_at=record.activated_at,
        is_active=record.is_active,
    )


def _payment_from_record(record: ActualPaymentRecord) -> ActualPayment:
    return ActualPayment(
        payment_id=record.id,
        debt_id=record.debt_id,
        amount=Decimal(record.amount),
        payment_date=record.payment_date,
        report_id=record.calculation_report_id,
        note=record.note,
    )


class DebtRepository:
    """Repository for the locally stored debts"""

    def __init__(self, db: Session):
        self.db = db

    def get_active_debts(self, user_id: str) -> List[Debt]:
        """Debts with an outstanding balance, in creation order"""
        records = (
            self.db.query(DebtRecord)
            .filter(DebtRecord.user_id == user_id, DebtRecord.current_balance > 0)
            .order_by(DebtRecord.id)
            .all()
        )
        return [_debt_from_record(r) for r in records]

    def get_debt(self, user_id: str, debt_id: int) -> Optional[Debt]:
        record = (
            self.db.query(DebtRecord)
            .filter(DebtRecord.id == debt_id, DebtRecord.user_id == user_id)
            .first()
        )
        return _debt_from_record(record) if record else None


class DatabaseDebtSource:
    """Debt source backed by the local debt table"""

    def __init__(self, db: Session):
        self.repository = DebtRepository(db)

    async def list_active_debts(self, user_id: str) -> List[Debt]:
        try:
            return self.repository.get_active_debts(user_id)
        except SQLAlchemyError as e:
            raise UpstreamUnavailableError(f"Debt store unavailable: {e}") from e

    async def current_balance(self, user_id: str) -> Decimal:
        debts = await self.list_active_debts(user_id)
        return sum((d.balance for d in debts), ZERO)


class ReportRepository:
    """Repository for calculation reports"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_fingerprint(self, user_id: str, scenario_hash: str) -> Optional[CalculationReport]:
        record = (
            self.db.query(CalculationReportRecord)
            .filter(
                CalculationReportRecord.user_id == user_id,
                CalculationReportRecord.scenario_hash == scenario_hash,
            )
            .first()
        )
        return _report_from_record(record) if record else None

    def insert(self, report: CalculationReport) -> uuid.UUID:
        """
        Persist a report.

        The (user_id, scenario_hash) unique constraint decides concurrent
        inserts of the same scenario: the loser rolls back and gets the
        winner's id instead of an error.
        """
        record = CalculationReportRecord(
            id=report.report_id,
            user_id=report.user_id,
            scenario_hash=report.scenario_hash,
            report_data=_REPORT_ADAPTER.dump_python(report, mode="json"),
            created_at=report.created_at,
        )
        self.db.add(record)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            winner = self.get_by_fingerprint(report.user_id, report.scenario_hash)
            if winner is None:
                raise
            return winner.report_id
        return report.report_id

    def get_by_id(self, user_id: str, report_id: uuid.UUID) -> Optional[CalculationReport]:
        record = (
            self.db.query(CalculationReportRecord)
            .filter(CalculationReportRecord.id == report_id, CalculationReportRecord.user_id == user_id)
            .first()
        )
        return _report_from_record(record) if record else None

    def list_recent_by_user(self, user_id: str, limit: int = 10) -> List[CalculationReport]:
        """Fetch most recent reports for a user"""
        records = (
            self.db.query(CalculationReportRecord)
            .filter(CalculationReportRecord.user_id == user_id)
            .order_by(CalculationReportRecord.created_at.desc())
            .limit(limit)
            .all()
        )
        return [_report_from_record(r) for r in records]

    def update_live_status(
        self, report_id: uuid.UUID, current_total_debt: Decimal, debt_statuses: Sequence[DebtStatus]
    ) -> None:
        """Write back the reconciled live balances"""
        record = self.db.query(CalculationReportRecord).filter(CalculationReportRecord.id == report_id).first()
        if record is None:
            return

        report = _report_from_record(record)
        report.current_total_debt = current_total_debt
        report.debt_statuses = list(debt_statuses)
        record.report_data = _REPORT_ADAPTER.dump_python(report, mode="json")
        self.db.commit()


class PlanRepository:
    """Repository for active plans"""

    def __init__(self, db: Session):
        self.db = db

    def get_active(self, user_id: str) -> Optional[ActivePlan]:
        record = (
            self.db.query(UserActivePlanRecord)
            .filter(UserActivePlanRecord.user_id == user_id, UserActivePlanRecord.is_active.is_(True))
            .order_by(UserActivePlanRecord.activated_at.desc(), UserActivePlanRecord.id.desc())
            .first()
        )
        return _plan_from_record(record) if record else None

    def activate(self, user_id: str, report_id: uuid.UUID, strategy: str) -> ActivePlan:
        """Soft-deactivate the user's current plans and add the new one"""
        (
            self.db.query(UserActivePlanRecord)
            .filter(UserActivePlanRecord.user_id == user_id, UserActivePlanRecord.is_active.is_(True))
            .update({UserActivePlanRecord.is_active: False}, synchronize_session=False)
        )
        record = UserActivePlanRecord(
            user_id=user_id,
            calculation_report_id=report_id,
            selected_strategy=strategy,
            activated_at=datetime.now(timezone.utc),
            is_active=True,
        )
        self.db.add(record)
        self.db.commit()
        return _plan_from_record(record)

    def repoint(self, plan_id: int, report_id: uuid.UUID) -> ActivePlan:
        """Move a plan onto a new report and refresh its activation time"""
        record = self.db.query(UserActivePlanRecord).filter(UserActivePlanRecord.id == plan_id).one()
        record.calculation_report_id = report_id
        record.activated_at = datetime.now(timezone.utc)
        self.db.commit()
        return _plan_from_record(record)


class PaymentRepository:
    """Repository for actual payments"""

    def __init__(self, db: Session):
        self.db = db

    def insert_batch(self, user_id: str, payments: Sequence[ActualPayment]) -> List[ActualPayment]:
        """
        Insert payments and decrement the paid debts in one transaction.

        Balances are clamped at zero. On any failure nothing is kept.

        Raises:
            DebtNotFoundError: a payment targets a debt the user does not own
            DistributionAtomicityError: the batch could not be written
        """
        stored: List[ActualPaymentRecord] = []
        try:
            for payment in payments:
                if payment.amount <= 0:
                    continue

                debt = (
                    self.db.query(DebtRecord)
                    .filter(DebtRecord.id == payment.debt_id, DebtRecord.user_id == user_id)
                    .with_for_update()
                    .first()
                )
                if debt is None:
                    raise DebtNotFoundError(f"Debt {payment.debt_id} not found for user {user_id}")

                record = ActualPaymentRecord(
                    debt_id=payment.debt_id,
                    amount=payment.amount,
                    payment_date=payment.payment_date,
                    calculation_report_id=payment.report_id,
                    note=payment.note,
                )
                self.db.add(record)
                stored.append(record)

                debt.current_balance = max(ZERO, Decimal(debt.current_balance) - payment.amount)

            self.db.commit()

        except DebtNotFoundError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DistributionAtomicityError("Payment batch could not be recorded") from e

        return [_payment_from_record(r) for r in stored]

    def sum_by_debt_and_period(self, debt_ids: Sequence[int], period: date) -> Dict[int, Decimal]:
        """Total already paid per debt in the calendar month containing period"""
        if not debt_ids:
            return {}

        start = month_start(period)
        end = add_months(period, 1)
        rows = (
            self.db.query(ActualPaymentRecord.debt_id, func.sum(ActualPaymentRecord.amount))
            .filter(
                ActualPaymentRecord.debt_id.in_(list(debt_ids)),
                ActualPaymentRecord.payment_date >= start,
                ActualPaymentRecord.payment_date < end,
            )
            .group_by(ActualPaymentRecord.debt_id)
            .all()
        )
        return {debt_id: Decimal(str(total)) for debt_id, total in rows if total is not None}

    def list_by_report_id(self, report_id: uuid.UUID) -> List[ActualPayment]:
        records = (
            self.db.query(ActualPaymentRecord)
            .filter(ActualPaymentRecord.calculation_report_id == report_id)
            .order_by(ActualPaymentRecord.payment_date, ActualPaymentRecord.id)
            .all()
        )
        return [_payment_from_record(r) for r in records]

    def list_by_user(self, user_id: str, report_id: Optional[uuid.UUID] = None) -> List[ActualPayment]:
        query = (
            self.db.query(ActualPaymentRecord)
            .join(DebtRecord, ActualPaymentRecord.debt_id == DebtRecord.id)
            .filter(DebtRecord.user_id == user_id)
        )
        if report_id is not None:
            query = query.filter(ActualPaymentRecord.calculation_report_id == report_id)

        records = query.order_by(ActualPaymentRecord.payment_date, ActualPaymentRecord.id).all()
        return [_payment_from_record(r) for r in records]
