"""Amortization simulator - month-by-month debt payoff projection"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from payoff_planner.domain.exceptions import InsufficientPaymentError, RunawaySimulationError
from payoff_planner.domain.models import Debt, DebtPayoffMilestone, MonthlyPaymentDetail, StrategyResult
from payoff_planner.domain.money import CENT, ZERO, ceil_to_cent, to_money
from payoff_planner.domain.strategies import Ordering
from payoff_planner.utils.date_utils import add_months, month_label

MAX_SIMULATION_MONTHS = 1200  # 100 years

_MONTHS_PER_YEAR = Decimal(12)
_PERCENT = Decimal(100)


@dataclass
class _DebtState:
    """Mutable per-simulation copy of a debt"""

    debt_id: int
    name: str
    balance: Decimal
    interest_rate: Decimal
    min_payment: Decimal

    @property
    def monthly_rate(self) -> Decimal:
        return self.interest_rate / _PERCENT / _MONTHS_PER_YEAR


def _open_debts(debts: Sequence[Debt]) -> List[_DebtState]:
    return [
        _DebtState(
            debt_id=d.debt_id,
            name=d.name,
            balance=Decimal(d.balance),
            interest_rate=Decimal(d.interest_rate),
            min_payment=Decimal(d.min_payment),
        )
        for d in debts
        if d.balance > 0
    ]


def check_payment_sufficiency(debts: Sequence[Debt], extra_payment: Decimal) -> None:
    """
    Fail fast when the monthly budget can never pay the debts down.

    The budget (all minimum payments plus the extra payment) must exceed the
    first month's total interest. Otherwise balances never shrink and the
    simulation would only stop at the month cap.

    The check is on the combined budget, not per debt. A debt whose own
    minimum is below its own interest passes when the other minimums and
    the extra payment cover the total; freed minimums flow to it as other
    debts are paid off.

    Raises:
        InsufficientPaymentError: carrying the shortfall, rounded up to the cent

    Example:
        10000 at 20% with a 50 minimum: interest 166.67 > 50 → deficit 116.67
    """
    open_debts = _open_debts(debts)
    if not open_debts:
        return

    interest = sum((d.balance * d.monthly_rate for d in open_debts), ZERO)
    budget = sum((d.min_payment for d in open_debts), ZERO) + extra_payment

    if budget <= interest:
        raise InsufficientPaymentError(max(ceil_to_cent(interest - budget), CENT))


def simulate_payoff(
    debts: Sequence[Debt],
    extra_payment: Decimal,
    order: Ordering,
    strategy_name: str,
    start_date: Optional[date] = None,
    max_months: int = MAX_SIMULATION_MONTHS,
) -> StrategyResult:
    """
    Project a full payoff schedule for one ordering strategy.

    Each month:
    1. Accrue interest on every open debt (full precision, no rounding)
    2. Pay every minimum, capped at the debt's balance. Any part of a minimum
       that is not needed goes to this month's extra pool
    3. Spend the extra pool (extra payment + minimums freed by debts paid off
       in earlier months + unspent minimums) on open debts in strategy order
    4. Debts that hit zero free their minimum for the following months

    Money is rounded to cents only in the reported values.

    Raises:
        InsufficientPaymentError: budget does not cover first-month interest
        RunawaySimulationError: schedule still open after max_months
    """
    check_payment_sufficiency(debts, extra_payment)

    if start_date is None:
        start_date = date.today()

    active = _open_debts(debts)
    beginning_debt = sum((d.balance for d in active), ZERO)
    freed_minimums = ZERO
    total_interest = ZERO
    schedule: List[MonthlyPaymentDetail] = []
    milestones: List[DebtPayoffMilestone] = []
    months = 0

    while active:
        months += 1
        if months > max_months:
            raise RunawaySimulationError(max_months)

        period = add_months(start_date, months)
        label = month_label(period)

        month_interest = ZERO
        for debt in active:
            interest = debt.balance * debt.monthly_rate
            debt.balance += interest
            month_interest += interest
        total_interest += month_interest

        extra_pool = extra_payment + freed_minimums
        paid_this_month = ZERO
        paid_off: List[_DebtState] = []

        # Minimums first, in input order
        for debt in active:
            payment = min(debt.min_payment, debt.balance)
            debt.balance -= payment
            paid_this_month += payment
            extra_pool += debt.min_payment - payment
            if debt.balance <= 0:
                debt.balance = ZERO
                paid_off.append(debt)

        # Then the extra pool, cascading down the priority order
        for debt in order([d for d in active if d.balance > 0]):
            if extra_pool <= 0:
                break
            applied = min(extra_pool, debt.balance)
            debt.balance -= applied
            extra_pool -= applied
            paid_this_month += applied
            if debt.balance <= 0:
                debt.balance = ZERO
                paid_off.append(debt)

        for debt in paid_off:
            freed_minimums += debt.min_payment
            milestones.append(DebtPayoffMilestone(month=months, month_year=label, debt_name=debt.name))

        active = [d for d in active if d.balance > 0]
        ending_balance = sum((d.balance for d in active), ZERO)

        schedule.append(
            MonthlyPaymentDetail(
                month=months,
                month_year=label,
                period=period,
                interest_paid=to_money(month_interest),
                principal_paid=to_money(paid_this_month - month_interest),
                total_payment=to_money(paid_this_month),
                ending_balance=to_money(ending_balance),
                paid_off_debts=[d.name for d in paid_off],
            )
        )

    payoff_month = add_months(start_date, months) if months else start_date.replace(day=1)

    return StrategyResult(
        strategy_name=strategy_name,
        total_interest_paid=to_money(total_interest),
        total_months=months,
        total_paid=to_money(beginning_debt + total_interest),
        payoff_date=f"{month_label(payoff_month)} ({months} Months)",
        payment_schedule=schedule,
        milestones=milestones,
    )
