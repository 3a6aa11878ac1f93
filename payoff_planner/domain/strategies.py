"""Payoff ordering functions shared by the simulator and the distributor.

A strategy is just a function that returns the open debts in priority
order. Anything with ``balance`` and ``interest_rate`` attributes can be
ordered. ``sorted`` is stable, so ties keep the caller's insertion order.
"""

from typing import Callable, Dict, List, Sequence, TypeVar

from payoff_planner.domain.exceptions import InvalidStrategyError

T = TypeVar("T")

Ordering = Callable[[Sequence[T]], List[T]]

SNOWBALL = "Snowball"
AVALANCHE = "Avalanche"


def order_for_snowball(debts: Sequence[T]) -> List[T]:
    """Smallest current balance first"""
    return sorted(debts, key=lambda d: d.balance)


def order_for_avalanche(debts: Sequence[T]) -> List[T]:
    """Highest interest rate first"""
    return sorted(debts, key=lambda d: d.interest_rate, reverse=True)


STRATEGIES: Dict[str, Ordering] = {
    SNOWBALL: order_for_snowball,
    AVALANCHE: order_for_avalanche,
}


def resolve_strategy(name: str) -> Ordering:
    """Map a strategy name from the outside world to its ordering function"""
    try:
        return STRATEGIES[name]
    except KeyError:
        raise InvalidStrategyError(f"Unknown strategy '{name}', expected Snowball or Avalanche") from None
