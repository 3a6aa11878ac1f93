"""Scenario fingerprint - cache key for identical calculation requests"""

import hashlib
from decimal import Decimal
from typing import Sequence

from payoff_planner.domain.models import Debt


def _canonical(value: Decimal) -> str:
    # 100, 100.0 and 100.00 must hash identically
    normalized = Decimal(value).normalize()
    return format(normalized, "f")


def scenario_fingerprint(user_id: str, extra_payment: Decimal, debts: Sequence[Debt]) -> str:
    """
    Deterministic hash over the simulation inputs.

    Debts are sorted by id so the order the debt source returns them in does
    not matter. Not cryptographic: a collision is simply treated as a cache hit.
    """
    parts = [f"USER:{user_id};", f"EXTRA:{_canonical(extra_payment)};"]
    for debt in sorted(debts, key=lambda d: d.debt_id):
        parts.append(
            f"DEBT:{debt.debt_id}:{_canonical(debt.balance)}:"
            f"{_canonical(debt.interest_rate)}:{_canonical(debt.min_payment)}|"
        )

    return hashlib.sha256("".join(parts).encode("utf-8")).hexdigest()
