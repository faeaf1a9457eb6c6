"""Precondition checks shared by the calculators"""

import math
import numbers

from wealth_engine.domain.exceptions import InvalidInputError, ParameterOutOfRangeError


def require_finite(name: str, value: float) -> float:
    """Reject NaN and infinities before they reach a calculation"""
    if value is None or not math.isfinite(value):
        raise InvalidInputError(f"{name} must be a finite number, got {value!r}")
    return value


def require_positive(name: str, value: float) -> float:
    require_finite(name, value)
    if value <= 0:
        raise InvalidInputError(f"{name} must be greater than 0, got {value}")
    return value


def require_non_negative(name: str, value: float) -> float:
    require_finite(name, value)
    if value < 0:
        raise InvalidInputError(f"{name} must not be negative, got {value}")
    return value


def require_int(name: str, value) -> int:
    """Counts such as years and ages must be whole numbers"""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidInputError(f"{name} must be a whole number, got {value!r}")
    return value


def require_range(name: str, value: float, low: float, high: float) -> float:
    """Inclusive range check raising ParameterOutOfRangeError"""
    require_finite(name, value)
    if value < low or value > high:
        raise ParameterOutOfRangeError(f"{name} must be between {low} and {high}, got {value}")
    return value


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)"""
    return math.floor(value + 0.5)
