"""Unit tests for shared precondition checks"""

import pytest
from wealth_engine.domain.exceptions import InvalidInputError, ParameterOutOfRangeError
from wealth_engine.utils.validation import (
    require_finite,
    require_int,
    require_non_negative,
    require_positive,
    require_range,
    round_half_up,
)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), None])
def test_require_finite_rejects_non_numbers(value):
    with pytest.raises(InvalidInputError):
        require_finite("x", value)


def test_require_positive_and_non_negative():
    assert require_positive("x", 0.01) == 0.01
    assert require_non_negative("x", 0) == 0
    with pytest.raises(InvalidInputError):
        require_positive("x", 0)
    with pytest.raises(InvalidInputError):
        require_non_negative("x", -0.01)


def test_require_range_is_inclusive():
    assert require_range("years", 1, 1, 30) == 1
    assert require_range("years", 30, 1, 30) == 30
    with pytest.raises(ParameterOutOfRangeError, match="years must be between 1 and 30"):
        require_range("years", 31, 1, 30)


@pytest.mark.parametrize("value", [10.5, 10.0, "10", True, None])
def test_require_int_rejects_non_integers(value):
    with pytest.raises(InvalidInputError, match="years must be a whole number"):
        require_int("years", value)


def test_require_int_accepts_integers():
    assert require_int("years", 10) == 10
    assert require_int("years", 0) == 0


@pytest.mark.parametrize("value, expected", [(2.5, 3), (2.4999, 2), (-2.5, -2), (-2.6, -3), (0, 0)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected
