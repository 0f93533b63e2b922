"""Output helpers for the EMI calculator.

This module provides the currency formatters handed to the engine's callers
and simple functions to render a loan summary and amortization schedule in a
tabular text format. The engine itself never formats money; every amount
shown to the user goes through one of the formatters defined here.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Sequence, Tuple

from .data_models import EmiResult, ScheduleEntry

Formatter = Callable[[float], str]

# code -> (prefix, suffix, decimals, indian grouping)
CURRENCY_STYLES: Dict[str, Tuple[str, str, int, bool]] = {
    "INR": ("₹", "", 0, True),
    "USD": ("$", "", 2, False),
    "EUR": ("€", "", 2, False),
    "GBP": ("£", "", 2, False),
}


def _group_indian(digits: str) -> str:
    """Group an integer digit string in lakhs and crores (12,34,56,789)."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(
    value: float,
    prefix: str = "",
    suffix: str = "",
    decimals: int = 0,
    indian_grouping: bool = False,
) -> str:
    """Format ``value`` as money with thousands separators.

    Rounding happens here, at display time; values passed in are the
    unrounded floats produced by the engine.
    """
    text = f"{abs(value):.{decimals}f}"
    whole, _, fraction = text.partition(".")
    if indian_grouping:
        whole = _group_indian(whole)
    else:
        whole = f"{int(whole):,}"
    body = f"{whole}.{fraction}" if fraction else whole
    # Avoid printing "-0" for tiny negative values that round to zero.
    sign = "-" if value < 0 and any(ch not in "0.," for ch in body) else ""
    return f"{sign}{prefix}{body}{suffix}"


def currency_formatter(code: str) -> Formatter:
    """Return a one-argument formatter for the given currency code."""
    try:
        prefix, suffix, decimals, indian = CURRENCY_STYLES[code.upper()]
    except KeyError:
        raise ValueError(f"Unsupported currency: {code}") from None

    def fmt(value: float) -> str:
        return format_currency(value, prefix, suffix, decimals, indian)

    return fmt


def print_summary(result: EmiResult, fmt: Formatter) -> None:
    """Print the loan summary in a human-readable format."""
    print("Loan Summary")
    print("-" * 72)
    print(f"Monthly EMI            : {fmt(result.emi)}")
    print(f"Total interest payable : {fmt(result.total_interest)}")
    print(f"Total amount payable   : {fmt(result.total_payable)}")
    print("-" * 72)


def schedule_rows(result: EmiResult, schedule: Iterable[ScheduleEntry], fmt: Formatter) -> Iterable[Sequence[str]]:
    """Yield the display cells of each schedule entry."""
    emi_text = fmt(result.emi)
    for entry in schedule:
        yield (
            str(entry.month),
            str(entry.year),
            emi_text,
            fmt(entry.principal_component),
            fmt(entry.interest_component),
            fmt(entry.balance_after_payment),
        )


SCHEDULE_HEADERS = ("Month", "Year", "EMI", "Principal Paid", "Interest Paid", "Balance Amount")


def print_schedule(result: EmiResult, schedule: Iterable[ScheduleEntry], fmt: Formatter) -> None:
    """Print the amortization schedule as a simple table."""
    print("\t".join(SCHEDULE_HEADERS))
    for row in schedule_rows(result, schedule, fmt):
        print("\t".join(row))


def print_comparison(r1: EmiResult, r2: EmiResult, fmt: Formatter) -> None:
    """Print two loan summaries side by side.

    The difference column is scenario2 - scenario1, so a negative difference
    means the second scenario is cheaper.
    """
    print("Comparison")
    print("=" * 72)
    print(f"{'Metric':16s} {'Scenario1':>17s} {'Scenario2':>17s} {'Difference':>17s}")
    for key in ("emi", "total_interest", "total_payable"):
        v1 = getattr(r1, key)
        v2 = getattr(r2, key)
        print(f"{key:16s} {fmt(v1):>17s} {fmt(v2):>17s} {fmt(v2 - v1):>17s}")
    print("=" * 72)
