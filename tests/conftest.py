"""Shared fixtures for the EMI calculator tests.

Fixture loan: 10 lakh principal, 8.5 % p.a., 20 years, schedule labelled
from January 2024 (first installment in February 2024).
"""

from datetime import date

import pytest

from emi_calc.data_models import LoanParameters


@pytest.fixture
def schedule_start() -> date:
    return date(2024, 1, 1)


@pytest.fixture
def standard_loan() -> LoanParameters:
    return LoanParameters(principal=1_000_000, annual_rate_percent=8.5, tenure_years=20)


@pytest.fixture
def client(monkeypatch):
    from emi_calc_web.app import app

    monkeypatch.setitem(app.config, "TESTING", True)
    monkeypatch.setitem(app.config, "SCHEDULE_START", "2024-01")
    monkeypatch.setitem(app.config, "DEFAULT_CURRENCY", "INR")
    monkeypatch.setitem(app.config, "MAX_ROWS", 240)
    return app.test_client()
