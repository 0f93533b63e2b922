"""Data models for the EMI calculator.

This module defines the value objects exchanged with the amortization engine:
the loan parameters supplied by the caller, the aggregate EMI result and the
individual schedule entries. They are frozen dataclasses; the engine creates
them fresh on every call and nothing mutates them afterwards.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LoanParameters:
    """Inputs of a single EMI calculation.

    Attributes
    ----------
    principal: float
        The loan amount. Must be greater than zero.
    annual_rate_percent: float
        The nominal annual interest rate in percent (``8.5`` means 8.5 %).
    tenure_years: int
        The loan duration in whole years.
    """

    principal: float
    annual_rate_percent: float
    tenure_years: int

    @property
    def total_months(self) -> int:
        """Number of monthly installments over the tenure."""
        return self.tenure_years * 12


@dataclass(frozen=True)
class EmiResult:
    """Aggregate figures for a loan.

    ``total_payable`` is ``emi * total_months`` and equals
    ``principal + total_interest`` up to floating point error.
    """

    emi: float
    total_interest: float
    total_payable: float


@dataclass(frozen=True)
class ScheduleEntry:
    """An entry in the amortization schedule.

    Each entry corresponds to one installment. ``month`` and ``year`` label
    the calendar month in which the installment falls.
    """

    period: int
    month: int
    year: int
    principal_component: float
    interest_component: float
    balance_after_payment: float

    @property
    def label(self) -> str:
        """Calendar month of the installment as ``YYYY-MM``."""
        return f"{self.year:04d}-{self.month:02d}"
