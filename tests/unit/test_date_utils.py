"""Unit tests for date helpers"""

from datetime import date
from wealth_engine.utils.date_utils import add_months, days_to_expiration, month_bounds


def test_add_months_clamps_to_month_end():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)


def test_add_months_crosses_year_boundaries():
    assert add_months(date(2024, 3, 15), -3) == date(2023, 12, 15)
    assert add_months(date(2024, 11, 5), 14) == date(2026, 1, 5)
    assert add_months(date(2024, 6, 1), 0) == date(2024, 6, 1)


def test_month_bounds():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2023, 12) == (date(2023, 12, 1), date(2023, 12, 31))


def test_days_to_expiration():
    assert days_to_expiration(date(2024, 1, 10), today=date(2024, 1, 1)) == 9
    assert days_to_expiration(date(2024, 1, 1), today=date(2024, 1, 1)) == 0


def test_expired_contract_has_zero_days():
    assert days_to_expiration(date(2023, 12, 1), today=date(2024, 1, 1)) == 0
