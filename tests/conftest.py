"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from decimal import Decimal
from typing import Callable, Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from payoff_planner.api.dependencies import get_event_sink
from payoff_planner.api.main import create_app
from payoff_planner.domain.exceptions import UpstreamUnavailableError
from payoff_planner.domain.models import Debt, ReportCreatedEvent
from payoff_planner.infrastructure.database.models import Base, DebtRecord
from payoff_planner.infrastructure.database.repositories import (
    DatabaseDebtSource,
    PaymentRepository,
    PlanRepository,
    ReportRepository,
)
from payoff_planner.infrastructure.database.session import get_db
from payoff_planner.services.calculation import CalculationService
from payoff_planner.services.plan import PlanService


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingEventSink:
    """Event sink that keeps published events in memory"""

    def __init__(self):
        self.events: List[ReportCreatedEvent] = []

    def publish(self, event: ReportCreatedEvent) -> None:
        self.events.append(event)


class FailingDebtSource:
    """Debt source that is always down"""

    async def list_active_debts(self, user_id: str) -> List[Debt]:
        raise UpstreamUnavailableError("Debt service timeout after 5.0s")

    async def current_balance(self, user_id: str) -> Decimal:
        raise UpstreamUnavailableError("Debt service timeout after 5.0s")


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def event_sink() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def failing_debt_source() -> FailingDebtSource:
    return FailingDebtSource()


@pytest.fixture
def client(db: Session, event_sink: RecordingEventSink) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_event_sink] = lambda: event_sink
    return TestClient(app)


@pytest.fixture
def add_debt(db: Session) -> Callable[..., int]:
    """Insert a debt row and return its id"""

    def _add_debt(
        user_id: str,
        name: str,
        balance: str,
        interest_rate: str,
        min_payment: str,
    ) -> int:
        record = DebtRecord(
            user_id=user_id,
            name=name,
            current_balance=Decimal(balance),
            interest_rate=Decimal(interest_rate),
            min_payment=Decimal(min_payment),
        )
        db.add(record)
        db.commit()
        return record.id

    return _add_debt


@pytest.fixture
def calculation_service(db: Session, event_sink: RecordingEventSink) -> CalculationService:
    return CalculationService(DatabaseDebtSource(db), ReportRepository(db), event_sink)


@pytest.fixture
def plan_service(db: Session, calculation_service: CalculationService) -> PlanService:
    return PlanService(
        PlanRepository(db),
        ReportRepository(db),
        PaymentRepository(db),
        DatabaseDebtSource(db),
        calculation_service,
    )


@pytest.fixture
def sample_debts() -> list[Debt]:
    """Three typical consumer debts"""
    return [
        Debt(debt_id=1, name="Credit Card", balance=Decimal("3000"), interest_rate=Decimal("24"), min_payment=Decimal("90")),
        Debt(debt_id=2, name="Car Loan", balance=Decimal("8000"), interest_rate=Decimal("7"), min_payment=Decimal("200")),
        Debt(debt_id=3, name="Store Card", balance=Decimal("600"), interest_rate=Decimal("18"), min_payment=Decimal("30")),
    ]
