"""Date manipulation utilities"""

from datetime import date
from typing import Tuple

_MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def month_start(value: date) -> date:
    """First day of the calendar month containing value"""
    return value.replace(day=1)


def add_months(value: date, months: int) -> date:
    """First day of the month `months` calendar months after value"""
    index = value.year * 12 + (value.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_label(value: date) -> str:
    """Human-readable month in English, e.g. 'October 2026', whatever the process locale"""
    return f"{_MONTH_NAMES[value.month - 1]} {value.year}"


def month_key(value: date) -> Tuple[int, int]:
    """(year, month) bucket used to group payments by calendar month"""
    return value.year, value.month
