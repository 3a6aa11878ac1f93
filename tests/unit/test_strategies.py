"""Unit tests for payoff ordering strategies"""

import pytest
from decimal import Decimal
from payoff_planner.domain.exceptions import InvalidStrategyError
from payoff_planner.domain.models import Debt
from payoff_planner.domain.strategies import (
    AVALANCHE,
    SNOWBALL,
    order_for_avalanche,
    order_for_snowball,
    resolve_strategy,
)


def names(debts):
    return [d.name for d in debts]


def test_snowball_orders_by_balance(sample_debts):
    assert names(order_for_snowball(sample_debts)) == ["Store Card", "Credit Card", "Car Loan"]


def test_avalanche_orders_by_rate(sample_debts):
    assert names(order_for_avalanche(sample_debts)) == ["Credit Card", "Store Card", "Car Loan"]


def test_ties_keep_input_order():
    debts = [
        Debt(debt_id=1, name="First", balance=Decimal("500"), interest_rate=Decimal("15"), min_payment=Decimal("10")),
        Debt(debt_id=2, name="Second", balance=Decimal("500"), interest_rate=Decimal("15"), min_payment=Decimal("10")),
    ]

    assert names(order_for_snowball(debts)) == ["First", "Second"]
    assert names(order_for_avalanche(debts)) == ["First", "Second"]


def test_ordering_does_not_mutate_input(sample_debts):
    before = names(sample_debts)
    order_for_snowball(sample_debts)
    assert names(sample_debts) == before


def test_resolve_known_strategies():
    assert resolve_strategy(SNOWBALL) is order_for_snowball
    assert resolve_strategy(AVALANCHE) is order_for_avalanche


@pytest.mark.parametrize("name", ["snowball", "Hybrid", ""])
def test_resolve_unknown_strategy(name):
    with pytest.raises(InvalidStrategyError):
        resolve_strategy(name)
