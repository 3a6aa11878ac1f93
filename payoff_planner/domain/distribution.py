"""Lump-sum payment distribution across multiple debts"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Mapping, Sequence

from payoff_planner.domain.models import Debt, PaymentInstruction
from payoff_planner.domain.money import ZERO
from payoff_planner.domain.strategies import Ordering


@dataclass
class _Allocation:
    debt_id: int
    balance: Decimal
    interest_rate: Decimal
    amount: Decimal = ZERO


def distribute_payment(
    debts: Sequence[Debt],
    recorded_payments: Mapping[int, Decimal],
    lump_amount: Decimal,
    order: Ordering,
) -> List[PaymentInstruction]:
    """
    Split one real payment across debts using the same priority order as the simulator.

    Requirements:
    - Minimums first: each debt (input order) gets what is still owed of its
      minimum for the period, after payments already recorded this period
    - The remainder goes to the highest-priority open debt, re-ranked after
      every allocation since balances change
    - Never allocates more than a debt's balance; any excess is left unallocated
    - One aggregated instruction per debt, in input order

    Args:
        debts: Debts with their live balances
        recorded_payments: debt_id -> amount already paid in the target period
        lump_amount: Money to distribute
        order: Strategy ordering function

    Returns:
        PaymentInstructions with positive amounts only
    """
    remaining = Decimal(lump_amount)
    allocations: Dict[int, _Allocation] = {}
    for debt in debts:
        allocations[debt.debt_id] = _Allocation(
            debt_id=debt.debt_id,
            balance=Decimal(debt.balance),
            interest_rate=Decimal(debt.interest_rate),
        )

    for debt in debts:
        if remaining <= 0:
            break
        allocation = allocations[debt.debt_id]
        owed = max(ZERO, debt.min_payment - recorded_payments.get(debt.debt_id, ZERO))
        amount = min(owed, allocation.balance, remaining)
        if amount > 0:
            allocation.amount += amount
            allocation.balance -= amount
            remaining -= amount

    while remaining > 0:
        open_allocations = [a for a in allocations.values() if a.balance > 0]
        if not open_allocations:
            break
        target = order(open_allocations)[0]
        amount = min(remaining, target.balance)
        target.amount += amount
        target.balance -= amount
        remaining -= amount

    return [
        PaymentInstruction(debt_id=a.debt_id, amount=a.amount)
        for a in allocations.values()
        if a.amount > 0
    ]
