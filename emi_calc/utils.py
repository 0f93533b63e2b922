"""Utility functions for the EMI calculator.

This module provides helpers for turning raw user input into numbers and for
handling calendar months. Input text that does not look numeric is never an
error here: it is coerced to a non-positive value so the engine reports "no
result yet" instead of failing while a form is being edited.
"""

from __future__ import annotations

from datetime import date
import calendar
import math
import re
from typing import Optional

# Digits with at most one decimal point (amount, rate) and digits only (tenure).
AMOUNT_PATTERN = re.compile(r"^\d*\.?\d*$")
TENURE_PATTERN = re.compile(r"^\d*$")


def is_numeric_text(value: str, allow_decimal: bool = True) -> bool:
    """Return True if ``value`` passes the input filter for a numeric field."""
    pattern = AMOUNT_PATTERN if allow_decimal else TENURE_PATTERN
    return bool(pattern.match(value))


def parse_number_text(value: Optional[str]) -> float:
    """Convert amount or rate text to a float, or ``0.0`` if it is unusable.

    Empty strings, a lone ``"."``, text with anything but digits and a single
    decimal point and values that overflow to infinity all map to ``0.0``.
    """
    if value is None:
        return 0.0
    value = value.strip()
    if not value or not is_numeric_text(value):
        return 0.0
    try:
        number = float(value)
    except ValueError:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def parse_tenure_text(value: Optional[str]) -> int:
    """Convert tenure text (whole years) to an int, or ``0`` if it is unusable."""
    if value is None:
        return 0
    value = value.strip()
    if not value or not is_numeric_text(value, allow_decimal=False):
        return 0
    try:
        return int(value)
    except ValueError:
        # Digit strings beyond the interpreter's int conversion limit.
        return 0


def parse_year_month(ym: str) -> date:
    """Parse a YYYY-MM string into a ``date`` object (first day of month).

    Parameters
    ----------
    ym: str
        A string in the form ``"YYYY-MM"``. The day component, if present,
        will be ignored.

    Raises
    ------
    ValueError
        If the string is not a valid year-month.
    """
    parts = ym.strip().split("-")
    try:
        if len(parts) < 2:
            raise ValueError
        return date(int(parts[0]), int(parts[1]), 1)
    except ValueError as exc:
        raise ValueError(f"Invalid year-month string: {ym}") from exc


def add_months(dt: date, months: int) -> date:
    """Return a new date a number of months after ``dt``.

    The day of the month is clamped to the last valid day if needed (e.g.,
    adding one month to Jan 31 yields Feb 28 or 29).
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def current_month(today: Optional[date] = None) -> date:
    """Return the first day of the month containing ``today`` (default: now)."""
    today = today or date.today()
    return today.replace(day=1)
