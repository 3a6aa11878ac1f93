"""Monetary rounding helpers"""

from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places for reporting"""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def ceil_to_cent(value: Decimal) -> Decimal:
    """Round up to the next cent (deficits are never understated)"""
    return Decimal(value).quantize(CENT, rounding=ROUND_CEILING)
