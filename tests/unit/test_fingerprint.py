"""Unit tests for scenario fingerprints"""

from decimal import Decimal
from payoff_planner.domain.fingerprint import scenario_fingerprint
from payoff_planner.domain.models import Debt


def test_fingerprint_is_hex_sha256(sample_debts):
    fingerprint = scenario_fingerprint("user_1", Decimal("100"), sample_debts)

    assert len(fingerprint) == 64
    assert all(c in "0123456789abcdef" for c in fingerprint)


def test_debt_order_does_not_matter(sample_debts):
    forward = scenario_fingerprint("user_1", Decimal("100"), sample_debts)
    backward = scenario_fingerprint("user_1", Decimal("100"), list(reversed(sample_debts)))

    assert forward == backward


def test_decimal_scale_does_not_matter():
    """100, 100.0 and 100.00 describe the same scenario"""
    short = [Debt(debt_id=1, name="Card", balance=Decimal("100"), interest_rate=Decimal("18"), min_payment=Decimal("25"))]
    padded = [
        Debt(debt_id=1, name="Card", balance=Decimal("100.00"), interest_rate=Decimal("18.0"), min_payment=Decimal("25.00"))
    ]

    assert scenario_fingerprint("user_1", Decimal("50"), short) == scenario_fingerprint(
        "user_1", Decimal("50.00"), padded
    )


def test_debt_name_is_not_part_of_the_scenario():
    a = [Debt(debt_id=1, name="Card", balance=Decimal("100"), interest_rate=Decimal("18"), min_payment=Decimal("25"))]
    b = [Debt(debt_id=1, name="Visa", balance=Decimal("100"), interest_rate=Decimal("18"), min_payment=Decimal("25"))]

    assert scenario_fingerprint("user_1", Decimal("0"), a) == scenario_fingerprint("user_1", Decimal("0"), b)


def test_inputs_change_fingerprint(sample_debts):
    base = scenario_fingerprint("user_1", Decimal("100"), sample_debts)

    assert scenario_fingerprint("user_2", Decimal("100"), sample_debts) != base
    assert scenario_fingerprint("user_1", Decimal("101"), sample_debts) != base

    changed = list(sample_debts)
    changed[0] = Debt(debt_id=1, name="Credit Card", balance=Decimal("2999.99"), interest_rate=Decimal("24"), min_payment=Decimal("90"))
    assert scenario_fingerprint("user_1", Decimal("100"), changed) != base
