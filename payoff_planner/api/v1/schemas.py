"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field, UUID4
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional


class CalculationRequest(BaseModel):
    """Request body for POST /v1/calculations"""

    extra_monthly_payment: Decimal = Field(Decimal("0"), ge=0, description="Extra money per month on top of minimums")


class CalculationResponse(BaseModel):
    """Response for POST /v1/calculations"""

    report_id: Optional[str] = None
    message: Optional[str] = None


class MonthlyPaymentSchema(BaseModel):
    """Single month of a payoff schedule"""

    model_config = ConfigDict(from_attributes=True)

    month: int
    month_year: str
    period: date
    interest_paid: Decimal
    principal_paid: Decimal
    total_payment: Decimal
    ending_balance: Decimal
    paid_off_debts: List[str]


class MilestoneSchema(BaseModel):
    """Debt paid off in a given month"""

    model_config = ConfigDict(from_attributes=True)

    month: int
    month_year: str
    debt_name: str


class StrategyResultSchema(BaseModel):
    """Outcome of one payoff strategy"""

    model_config = ConfigDict(from_attributes=True)

    strategy_name: str
    total_interest_paid: Decimal
    total_months: int
    total_paid: Decimal
    payoff_date: str
    payment_schedule: List[MonthlyPaymentSchema]
    milestones: List[MilestoneSchema]


class DebtStatusSchema(BaseModel):
    """Starting vs current balance of one debt"""

    model_config = ConfigDict(from_attributes=True)

    debt_id: int
    debt_name: str
    starting_balance: Decimal
    current_balance: Decimal
    is_paid_off: bool


class ReportResponse(BaseModel):
    """Response for GET /v1/calculations/{report_id}"""

    model_config = ConfigDict(from_attributes=True)

    report_id: UUID4
    beginning_debt: Decimal
    snowball: StrategyResultSchema
    avalanche: StrategyResultSchema
    recommended_strategy: str
    recommendation: str
    extra_payment: Decimal
    created_at: datetime
    current_total_debt: Decimal
    debt_statuses: List[DebtStatusSchema]


class HistoryItem(BaseModel):
    """Single report in history"""

    model_config = ConfigDict(from_attributes=True)

    report_id: UUID4
    created_at: datetime
    total_debt: Decimal
    extra_payment: Decimal
    recommended_strategy: str
    recommended_payoff_date: str
    interest_saved: Decimal


class HistoryResponse(BaseModel):
    """Response for GET /v1/calculations/history"""

    user_id: str
    reports: List[HistoryItem]


class ActivatePlanRequest(BaseModel):
    """Request body for POST /v1/plans/activate"""

    report_id: UUID4
    strategy: str = Field(..., description="Snowball or Avalanche")


class ActivatePlanResponse(BaseModel):
    """Response for POST /v1/plans/activate"""

    plan_id: int
    report_id: UUID4
    strategy: str
    activated_at: datetime


class PlanMonthSchema(BaseModel):
    """Planned month with what was actually paid"""

    month: int
    month_year: str
    total_payment: Decimal
    ending_balance: Decimal
    paid_off_debts: List[str]
    is_paid: bool
    actual_paid_amount: Decimal
    payment_date: Optional[date] = None


class ActivePlanResponse(BaseModel):
    """Response for GET /v1/plans/active"""

    report_id: UUID4
    strategy: str
    status: str
    is_plan_outdated: bool
    current_month: Optional[int] = None
    expected_balance: Decimal
    current_total_debt: Decimal
    beginning_debt: Decimal
    extra_payment: Decimal
    months: List[PlanMonthSchema]
    debt_statuses: List[DebtStatusSchema]


class RecalculateResponse(BaseModel):
    """Response for POST /v1/plans/recalculate"""

    message: str
    report_id: str


class PaymentRequest(BaseModel):
    """Request body for POST /v1/payments"""

    debt_id: int
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    payment_date: Optional[date] = None
    report_id: Optional[UUID4] = None
    note: Optional[str] = None


class DistributePaymentRequest(BaseModel):
    """Request body for POST /v1/payments/distribute"""

    amount: Decimal = Field(..., gt=0, decimal_places=2)
    strategy: str = "Avalanche"
    payment_date: Optional[date] = None
    report_id: Optional[UUID4] = None


class PaymentSchema(BaseModel):
    """Recorded payment"""

    model_config = ConfigDict(from_attributes=True)

    payment_id: Optional[int] = None
    debt_id: int
    amount: Decimal
    payment_date: date
    report_id: Optional[UUID4] = None
    note: Optional[str] = None


class AllocationSchema(BaseModel):
    """Part of a lump payment assigned to one debt"""

    model_config = ConfigDict(from_attributes=True)

    debt_id: int
    amount: Decimal


class DistributionResponse(BaseModel):
    """Response for POST /v1/payments/distribute"""

    allocations: List[AllocationSchema]
    total_allocated: Decimal


class PaymentHistoryResponse(BaseModel):
    """Response for GET /v1/payments/history"""

    user_id: str
    payments: List[PaymentSchema]
