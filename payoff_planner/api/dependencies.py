"""Dependency injection for FastAPI endpoints"""

from fastapi import BackgroundTasks, Depends, Header
from sqlalchemy.orm import Session

from payoff_planner.config import settings
from payoff_planner.domain.ports import DebtSource, EventSink
from payoff_planner.infrastructure.clients.debt_service import DebtServiceClient
from payoff_planner.infrastructure.clients.notifications import NotificationClient, WebhookEventSink
from payoff_planner.infrastructure.database.repositories import (
    DatabaseDebtSource,
    DebtRepository,
    PaymentRepository,
    PlanRepository,
    ReportRepository,
)
from payoff_planner.infrastructure.database.session import get_db
from payoff_planner.services.calculation import CalculationService
from payoff_planner.services.payments import PaymentService
from payoff_planner.services.plan import PlanService


def get_user_id(x_user_id: str = Header(..., min_length=1)) -> str:
    """Authenticated user id, set by the gateway in front of this service"""
    return x_user_id


def get_debt_source(db: Session = Depends(get_db)) -> DebtSource:
    """Remote debt service when configured, local debt table otherwise"""
    if settings.debt_service_base:
        return DebtServiceClient()
    return DatabaseDebtSource(db)


def get_notification_client() -> NotificationClient:
    """Provide notification webhook client instance"""
    return NotificationClient()


def get_event_sink(
    background_tasks: BackgroundTasks,
    client: NotificationClient = Depends(get_notification_client),
) -> EventSink:
    """Deliver events after the response is sent"""
    return WebhookEventSink(background_tasks, client)


def get_calculation_service(
    db: Session = Depends(get_db),
    debt_source: DebtSource = Depends(get_debt_source),
    events: EventSink = Depends(get_event_sink),
) -> CalculationService:
    return CalculationService(debt_source, ReportRepository(db), events)


def get_plan_service(
    db: Session = Depends(get_db),
    debt_source: DebtSource = Depends(get_debt_source),
    calculation_service: CalculationService = Depends(get_calculation_service),
) -> PlanService:
    return PlanService(
        PlanRepository(db),
        ReportRepository(db),
        PaymentRepository(db),
        debt_source,
        calculation_service,
    )


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    return PaymentService(DebtRepository(db), PaymentRepository(db), PlanRepository(db))
