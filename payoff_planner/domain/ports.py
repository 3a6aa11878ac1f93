"""Contracts the engine expects from its collaborators"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Protocol, Sequence

from payoff_planner.domain.models import (
    ActivePlan,
    ActualPayment,
    CalculationReport,
    Debt,
    DebtStatus,
    ReportCreatedEvent,
)


class DebtSource(Protocol):
    """Owner of the user's debts"""

    async def list_active_debts(self, user_id: str) -> List[Debt]:
        ...

    async def current_balance(self, user_id: str) -> Decimal:
        ...


class ReportStore(Protocol):
    """Persistence for calculation reports"""

    def get_by_fingerprint(self, user_id: str, scenario_hash: str) -> Optional[CalculationReport]:
        ...

    def insert(self, report: CalculationReport) -> uuid.UUID:
        """Store a report; returns the id of the report that won a fingerprint race"""
        ...

    def get_by_id(self, user_id: str, report_id: uuid.UUID) -> Optional[CalculationReport]:
        ...

    def list_recent_by_user(self, user_id: str, limit: int = 10) -> List[CalculationReport]:
        ...

    def update_live_status(
        self, report_id: uuid.UUID, current_total_debt: Decimal, debt_statuses: Sequence[DebtStatus]
    ) -> None:
        ...


class PlanStore(Protocol):
    """Persistence for active plans"""

    def get_active(self, user_id: str) -> Optional[ActivePlan]:
        ...

    def activate(self, user_id: str, report_id: uuid.UUID, strategy: str) -> ActivePlan:
        """Deactivate every current plan of the user and add the new one"""
        ...

    def repoint(self, plan_id: int, report_id: uuid.UUID) -> ActivePlan:
        ...


class PaymentStore(Protocol):
    """Append-only store of real payments"""

    def insert_batch(self, user_id: str, payments: Sequence[ActualPayment]) -> List[ActualPayment]:
        """Insert payments and decrement debt balances in one transaction"""
        ...

    def sum_by_debt_and_period(self, debt_ids: Sequence[int], period: date) -> Dict[int, Decimal]:
        ...

    def list_by_report_id(self, report_id: uuid.UUID) -> List[ActualPayment]:
        ...

    def list_by_user(self, user_id: str, report_id: Optional[uuid.UUID] = None) -> List[ActualPayment]:
        ...


class EventSink(Protocol):
    """Fire-and-forget notifications"""

    def publish(self, event: ReportCreatedEvent) -> None:
        ...
