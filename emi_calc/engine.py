"""Core calculation engine for the EMI calculator.

This module computes the equated monthly installment (EMI) of a fixed-rate
loan and walks the full amortization schedule month by month. Everything here
is a pure function of its arguments: invalid or incomplete parameters produce
``None`` rather than an exception, because the usual caller is a form that is
still being filled in.
"""

from __future__ import annotations

from datetime import date
import logging
import math
from typing import List, Optional, Tuple

from .data_models import EmiResult, LoanParameters, ScheduleEntry
from .utils import add_months, current_month, parse_number_text, parse_tenure_text

logger = logging.getLogger(__name__)

# Longer tenures are treated like any other unusable input.
MAX_TENURE_YEARS = 100

Amortization = Tuple[EmiResult, Tuple[ScheduleEntry, ...]]


def monthly_rate(annual_rate_percent: float) -> float:
    """Convert a nominal annual rate in percent to a monthly decimal rate."""
    return annual_rate_percent / 12 / 100


def calculate_emi(principal: float, rate_per_month: float, total_months: int) -> float:
    """Return the annuity (equal installment) monthly payment for a loan.

    The formula is:

        emi = P * i * (1 + i)^n / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``.

    It is evaluated as ``P * i / (1 - (1 + i)^-n)`` with ``log1p``/``expm1``
    so that large ``n * ln(1 + i)`` tends to ``P * i`` instead of overflowing
    and tiny rates do not cancel to a zero denominator.
    """
    if total_months <= 0:
        raise ValueError("Number of installments must be positive")
    if rate_per_month == 0:
        return principal / total_months
    discount = -math.expm1(-total_months * math.log1p(rate_per_month))
    return principal * rate_per_month / discount


def _is_valid(params: LoanParameters) -> bool:
    # NaN compares False against zero, so it is rejected too.
    return (
        0 < params.principal < math.inf
        and 0 < params.annual_rate_percent < math.inf
        and 0 < params.tenure_years <= MAX_TENURE_YEARS
    )


def _fits_calendar(start: date, total_months: int) -> bool:
    """Return True if the last installment still falls on or before ``date.max``."""
    last_year = start.year + (start.month - 1 + total_months) // 12
    return last_year <= date.max.year


def compute_amortization(
    params: LoanParameters, schedule_start: Optional[date] = None
) -> Optional[Amortization]:
    """Compute the EMI, totals and amortization schedule for a loan.

    Parameters
    ----------
    params: LoanParameters
        Principal, annual rate in percent and tenure in whole years.
    schedule_start: date, optional
        The calendar month immediately preceding the first installment, so
        installment ``i`` is labelled ``schedule_start + i`` months. Defaults
        to the current month.

    Returns
    -------
    (EmiResult, tuple of ScheduleEntry) or None
        ``None`` when any parameter is not positive, the tenure exceeds
        ``MAX_TENURE_YEARS`` or the schedule would run past the last
        representable calendar year. Otherwise the aggregate
        result and one entry per month of the tenure. The last entry always
        has a balance of exactly zero.
    """
    if not _is_valid(params):
        logger.debug("No amortization for incomplete parameters %s", params)
        return None

    start = schedule_start or current_month()
    total_months = params.total_months
    if not _fits_calendar(start, total_months):
        logger.debug("Schedule from %s for %d months runs past year %d", start, total_months, date.max.year)
        return None
    rate = monthly_rate(params.annual_rate_percent)

    emi = calculate_emi(params.principal, rate, total_months)
    total_payable = emi * total_months
    total_interest = total_payable - params.principal

    schedule: List[ScheduleEntry] = []
    balance = params.principal
    for period in range(1, total_months + 1):
        interest = balance * rate
        principal_component = emi - interest
        balance -= principal_component
        label = add_months(start, period)
        schedule.append(
            ScheduleEntry(
                period=period,
                month=label.month,
                year=label.year,
                principal_component=principal_component,
                interest_component=interest,
                # Repeated subtraction drifts; the final balance is zero by definition.
                balance_after_payment=0.0 if period == total_months else max(0.0, balance),
            )
        )

    logger.debug(
        "Computed %d installments of %.2f for principal %.2f",
        total_months,
        emi,
        params.principal,
    )
    result = EmiResult(emi=emi, total_interest=total_interest, total_payable=total_payable)
    return result, tuple(schedule)


def amortize_text(
    amount: Optional[str],
    rate: Optional[str],
    tenure: Optional[str],
    schedule_start: Optional[date] = None,
) -> Optional[Amortization]:
    """Run :func:`compute_amortization` on raw form text.

    Text that is not numeric is treated as zero, which yields ``None``.
    """
    params = LoanParameters(
        principal=parse_number_text(amount),
        annual_rate_percent=parse_number_text(rate),
        tenure_years=parse_tenure_text(tenure),
    )
    return compute_amortization(params, schedule_start)
