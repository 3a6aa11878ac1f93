"""SQLAlchemy ORM models for debts, reports, plans and payments"""

import uuid
from sqlalchemy import (
    Column,
    String,
    Boolean,
    Numeric,
    DateTime,
    Date,
    Integer,
    ForeignKey,
    Text,
    JSON,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class DebtRecord(Base):
    """A user's debt, owned by the debt service"""

    __tablename__ = "debt"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    current_balance = Column(Numeric(18, 2), nullable=False)
    interest_rate = Column(Numeric(5, 2), nullable=False)
    min_payment = Column(Numeric(18, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    payments = relationship("ActualPaymentRecord", back_populates="debt", cascade="all, delete-orphan")


class CalculationReportRecord(Base):
    """Stored Snowball vs Avalanche comparison"""

    __tablename__ = "calculation_report"
    __table_args__ = (UniqueConstraint("user_id", "scenario_hash", name="uq_calculation_report_scenario"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    scenario_hash = Column(String(64), nullable=False, index=True)
    report_data = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class UserActivePlanRecord(Base):
    """Report + strategy a user is tracking; old rows are kept inactive"""

    __tablename__ = "user_active_plan"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, nullable=False, index=True)
    calculation_report_id = Column(
        UUID(as_uuid=True), ForeignKey("calculation_report.id", ondelete="CASCADE"), nullable=False
    )
    selected_strategy = Column(Text, nullable=False)
    activated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    is_active = Column(Boolean, nullable=False, default=True)


class ActualPaymentRecord(Base):
    """A real payment made against a debt"""

    __tablename__ = "actual_payment"

    id = Column(Integer, primary_key=True, autoincrement=True)
    debt_id = Column(Integer, ForeignKey("debt.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(18, 2), nullable=False)
    payment_date = Column(Date, nullable=False)
    calculation_report_id = Column(UUID(as_uuid=True), nullable=True, index=True)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    debt = relationship("DebtRecord", back_populates="payments")
