"""Pytest fixtures for testing"""

import pytest
from datetime import date
from fastapi.testclient import TestClient
from wealth_engine.api.main import create_app
from wealth_engine.domain.models import DividendFrequency, Holding, OptionParameters, OptionType


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    app = create_app()
    return TestClient(app)


@pytest.fixture
def sample_holdings() -> list[Holding]:
    """A small income portfolio: one quarterly payer, one monthly payer"""
    return [
        Holding(
            symbol="SCHD",
            shares=100,
            cost_basis=7500,
            annual_dividend=2.64,  # $264 a year, $66 a quarter
            frequency=DividendFrequency.QUARTERLY,
            next_ex_date=date(2024, 3, 14),
            dividend_growth_rate=10.0,
        ),
        Holding(
            symbol="O",
            shares=50,
            cost_basis=2500,
            annual_dividend=3.08,  # $154 a year
            frequency=DividendFrequency.MONTHLY,
            next_ex_date=date(2024, 3, 28),
            payment_date=date(2024, 4, 15),
            dividend_growth_rate=4.0,
        ),
    ]


@pytest.fixture
def atm_call() -> OptionParameters:
    """At-the-money 30 DTE call with 30% IV"""
    return OptionParameters(
        underlying_price=100,
        strike=100,
        implied_volatility=0.30,
        days_to_expiry=30,
        option_type=OptionType.CALL,
        premium=3.50,
    )
