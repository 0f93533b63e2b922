"""Command‑line interface for the EMI calculator.

This module uses the ``click`` library to implement a multi‑command interface.
Users can print the full amortization schedule, view only the loan summary or
compare two loans. Results can be printed to the terminal or exported to
JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
import math
import shlex
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence

import click

from .data_models import EmiResult, LoanParameters, ScheduleEntry
from .engine import Amortization, compute_amortization
from .formatter import CURRENCY_STYLES, currency_formatter, print_comparison, print_schedule, print_summary
from .utils import parse_year_month


def parse_amount(value: str) -> float:
    """Parse a numeric string with optional suffixes.

    Accepts plain floats ("500000") and shorthand with ``k``/``m`` suffixes
    (e.g., "500k" meaning 500_000). Returns a float.
    """
    value = value.strip().lower()
    value = value.replace(",", "")
    factor = 1.0
    if value.endswith("k"):
        factor = 1_000.0
        value = value[:-1]
    elif value.endswith("m"):
        factor = 1_000_000.0
        value = value[:-1]
    try:
        amount = float(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")
    if not math.isfinite(amount):
        raise click.BadParameter(f"Invalid amount: {value}")
    return amount


def parse_rate(value: str) -> float:
    """Parse an annual rate in percent ("8.5" or "8.5%")."""
    value = value.strip()
    if value.endswith("%"):
        value = value[:-1]
    try:
        rate = float(value)
    except ValueError:
        raise click.BadParameter(f"Invalid interest rate: {value}")
    if not math.isfinite(rate):
        raise click.BadParameter(f"Invalid interest rate: {value}")
    return rate


def parse_start(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return parse_year_month(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def build_parameters(amount: str, rate: str, tenure: int) -> LoanParameters:
    return LoanParameters(
        principal=parse_amount(amount),
        annual_rate_percent=parse_rate(rate),
        tenure_years=tenure,
    )


def run_engine(params: LoanParameters, start: Optional[date]) -> Amortization:
    """Compute the amortization or fail with a usage error for empty input."""
    amortization = compute_amortization(params, start)
    if amortization is None:
        raise click.UsageError("Loan amount, interest rate and tenure must all be positive")
    return amortization


def serialize_result(result: EmiResult) -> Dict[str, float]:
    return {
        "emi": result.emi,
        "total_interest": result.total_interest,
        "total_payable": result.total_payable,
    }


def serialize_entry(entry: ScheduleEntry) -> Dict[str, Any]:
    return {
        "period": entry.period,
        "month": entry.month,
        "year": entry.year,
        "principal": entry.principal_component,
        "interest": entry.interest_component,
        "balance": entry.balance_after_payment,
    }


def export_to_json(path: Path, result: EmiResult, schedule: Optional[Sequence[ScheduleEntry]] = None) -> None:
    """Export the summary (and optionally the schedule) to a JSON file."""
    data: Dict[str, Any] = {"summary": serialize_result(result)}
    if schedule is not None:
        data["schedule"] = [serialize_entry(e) for e in schedule]
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: Sequence[ScheduleEntry]) -> None:
    """Export the schedule to a CSV file."""
    header = ["Period", "Month", "Year", "Principal", "Interest", "Balance"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for e in schedule:
            writer.writerow(
                [
                    e.period,
                    e.month,
                    e.year,
                    e.principal_component,
                    e.interest_component,
                    e.balance_after_payment,
                ]
            )


def loan_options(func: Callable) -> Callable:
    """Attach the options shared by the ``schedule`` and ``summary`` commands."""
    options = [
        click.option("--amount", "-a", "amount", required=True, help="Loan amount (accepts 500k, 1.2m)"),
        click.option("--rate", "-r", "rate", required=True, help="Annual interest rate (percent)"),
        click.option("--tenure", "-t", "tenure", required=True, type=int, help="Loan tenure in years"),
        click.option(
            "--start",
            "-s",
            "start",
            envvar="EMI_CALC_SCHEDULE_START",
            help="Month before the first installment (YYYY-MM). Defaults to the current month.",
        ),
        click.option(
            "--currency",
            "currency",
            type=click.Choice(sorted(CURRENCY_STYLES), case_sensitive=False),
            default="INR",
            show_default=True,
            help="Currency used to display amounts",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """An EMI calculator for fixed-rate loans."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@loan_options
@click.option("--max-rows", "max_rows", type=int, default=120, show_default=True, help="Rows printed to the terminal")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    amount: str,
    rate: str,
    tenure: int,
    start: Optional[str],
    currency: str,
    max_rows: int,
    output: Optional[str],
) -> None:
    """Compute and print the full amortization schedule."""
    result, entries = run_engine(build_parameters(amount, rate, tenure), parse_start(start))
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result, entries)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, entries)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return
    fmt = currency_formatter(currency)
    print_summary(result, fmt)
    # Limit schedule length printed to avoid flooding the terminal
    if len(entries) > max_rows:
        click.echo(f"Schedule has {len(entries)} rows; showing first {max_rows} rows.")
        print_schedule(result, entries[:max_rows], fmt)
    else:
        print_schedule(result, entries, fmt)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    amount: str,
    rate: str,
    tenure: int,
    start: Optional[str],
    currency: str,
    output: Optional[str],
) -> None:
    """Compute and print only the summary for a loan."""
    result, _ = run_engine(build_parameters(amount, rate, tenure), parse_start(start))
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        export_to_json(path, result)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(result, currency_formatter(currency))


def parse_scenario_opts(opts: str) -> LoanParameters:
    """Convert a quoted scenario option string into loan parameters."""
    tokens = shlex.split(opts)
    params: Dict[str, Optional[str]] = {"amount": None, "rate": None, "tenure": None}
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token in ("-a", "--amount"):
            key = "amount"
        elif token in ("-r", "--rate"):
            key = "rate"
        elif token in ("-t", "--tenure"):
            key = "tenure"
        else:
            raise click.BadParameter(f"Unknown option in scenario: {token}")
        if i + 1 >= len(tokens):
            raise click.BadParameter(f"Option {token} in scenario needs a value")
        params[key] = tokens[i + 1]
        i += 2
    for name, value in params.items():
        if value is None:
            raise click.BadParameter(f"Scenario missing required option {name}")
    try:
        tenure = int(params["tenure"])
    except ValueError:
        raise click.BadParameter(f"Invalid tenure: {params['tenure']}")
    return build_parameters(params["amount"], params["rate"], tenure)


@cli.command()
@click.option("--scenario1", "scenario1", required=True, help="First scenario options quoted string")
@click.option("--scenario2", "scenario2", required=True, help="Second scenario options quoted string")
@click.option(
    "--currency",
    "currency",
    type=click.Choice(sorted(CURRENCY_STYLES), case_sensitive=False),
    default="INR",
    show_default=True,
)
def compare(scenario1: str, scenario2: str, currency: str) -> None:
    """Compare two loan scenarios.

    Scenarios are provided as quoted option strings, for example:

        emi-calc compare --scenario1 "-a 1m -r 8.5 -t 20" --scenario2 "-a 1m -r 8.1 -t 15"
    """
    result1, _ = run_engine(parse_scenario_opts(scenario1), None)
    result2, _ = run_engine(parse_scenario_opts(scenario2), None)
    print_comparison(result1, result2, currency_formatter(currency))


if __name__ == "__main__":
    cli()
