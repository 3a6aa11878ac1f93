"""Domain models - pure Python dataclasses representing business entities"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional


@dataclass
class Debt:
    """Snapshot of one debt as read from the debt source"""

    debt_id: int
    name: str
    balance: Decimal
    interest_rate: Decimal  # annual, percent (0-100)
    min_payment: Decimal
    starting_balance: Optional[Decimal] = None

    def __post_init__(self) -> None:
        if self.starting_balance is None:
            self.starting_balance = self.balance


@dataclass
class MonthlyPaymentDetail:
    """One month of a simulated payoff schedule"""

    month: int
    month_year: str  # e.g. "October 2026"
    period: date  # first day of the calendar month
    interest_paid: Decimal
    principal_paid: Decimal
    total_payment: Decimal
    ending_balance: Decimal
    paid_off_debts: List[str] = field(default_factory=list)


@dataclass
class DebtPayoffMilestone:
    """A debt reaching zero in a given month"""

    month: int
    month_year: str
    debt_name: str


@dataclass
class StrategyResult:
    """Full outcome of simulating one payoff strategy"""

    strategy_name: str
    total_interest_paid: Decimal
    total_months: int
    total_paid: Decimal
    payoff_date: str  # e.g. "March 2029 (29 Months)"
    payment_schedule: List[MonthlyPaymentDetail]
    milestones: List[DebtPayoffMilestone] = field(default_factory=list)


@dataclass
class DebtStatus:
    """Starting vs live balance of one debt in a report"""

    debt_id: int
    debt_name: str
    starting_balance: Decimal
    current_balance: Decimal

    @property
    def is_paid_off(self) -> bool:
        return self.current_balance <= 0


@dataclass
class CalculationReport:
    """Snowball vs Avalanche comparison for one scenario"""

    report_id: uuid.UUID
    user_id: str
    beginning_debt: Decimal
    snowball: StrategyResult
    avalanche: StrategyResult
    recommended_strategy: str
    recommendation: str
    extra_payment: Decimal
    scenario_hash: str
    created_at: datetime
    current_total_debt: Decimal
    debt_statuses: List[DebtStatus] = field(default_factory=list)

    def result_for(self, strategy: str) -> StrategyResult:
        return self.avalanche if strategy == "Avalanche" else self.snowball


@dataclass
class CalculationHistoryItem:
    """Summary row for the calculation history list"""

    report_id: uuid.UUID
    created_at: datetime
    total_debt: Decimal
    extra_payment: Decimal
    recommended_strategy: str
    recommended_payoff_date: str
    interest_saved: Decimal


@dataclass
class ActivePlan:
    """Report + strategy a user tracks against real payments"""

    plan_id: int
    user_id: str
    report_id: uuid.UUID
    strategy: str
    activated_at: datetime
    is_active: bool = True


@dataclass
class ActualPayment:
    """A real payment recorded against a debt"""

    debt_id: int
    amount: Decimal
    payment_date: date
    report_id: Optional[uuid.UUID] = None
    payment_id: Optional[int] = None
    note: Optional[str] = None


@dataclass
class PaymentInstruction:
    """Amount of a lump payment allocated to one debt"""

    debt_id: int
    amount: Decimal


@dataclass
class PlanMonth:
    """Planned month overlaid with what was actually paid"""

    detail: MonthlyPaymentDetail
    is_paid: bool = False
    actual_paid_amount: Decimal = Decimal("0")
    payment_date: Optional[date] = None


@dataclass
class ReconciledPlan:
    """Active plan status after overlaying real payments"""

    report_id: uuid.UUID
    strategy: str
    extra_payment: Decimal
    beginning_debt: Decimal
    months: List[PlanMonth]
    current_month: Optional[int]  # None once every month is paid
    expected_balance: Decimal
    current_total_debt: Decimal
    debt_statuses: List[DebtStatus]
    is_plan_outdated: bool
    status: str  # "on_track" | "outdated" | "complete"


@dataclass
class ReportCreatedEvent:
    """Notification payload emitted when a new report is stored"""

    user_id: str
    report_id: uuid.UUID
    total_debt: Decimal
    created_at: datetime
