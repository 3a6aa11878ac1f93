"""Unit tests for rounding and calendar helpers"""

from datetime import date
from decimal import Decimal
from payoff_planner.domain.money import ceil_to_cent, to_money
from payoff_planner.utils.date_utils import add_months, month_key, month_label, month_start


def test_to_money_rounds_half_up():
    assert to_money(Decimal("2.345")) == Decimal("2.35")
    assert to_money(Decimal("2.344")) == Decimal("2.34")
    assert str(to_money(Decimal("7"))) == "7.00"


def test_ceil_to_cent_never_understates():
    assert ceil_to_cent(Decimal("116.6666")) == Decimal("116.67")
    assert ceil_to_cent(Decimal("0.001")) == Decimal("0.01")
    assert ceil_to_cent(Decimal("5.00")) == Decimal("5.00")


def test_add_months_crosses_year_end():
    assert add_months(date(2026, 11, 30), 1) == date(2026, 12, 1)
    assert add_months(date(2026, 12, 31), 1) == date(2027, 1, 1)
    assert add_months(date(2026, 1, 31), 25) == date(2028, 2, 1)


def test_month_helpers():
    assert month_start(date(2026, 10, 19)) == date(2026, 10, 1)
    assert month_label(date(2026, 10, 1)) == "October 2026"
    assert month_key(date(2026, 10, 19)) == (2026, 10)


def test_month_label_uses_english_names_for_every_month():
    expected = [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ]

    labels = [month_label(date(2027, m, 1)) for m in range(1, 13)]

    assert labels == [f"{name} 2027" for name in expected]
