"""Date manipulation utilities"""

import calendar
from datetime import date
from typing import Optional, Tuple


def add_months(from_date: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month's length

    Jan 31 + 1 month -> Feb 28 (or 29), matching how payment schedules roll.
    """
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(from_date.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a calendar month"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def days_to_expiration(expiration: date, today: Optional[date] = None) -> int:
    """Whole days until expiration, never negative"""
    if today is None:
        today = date.today()
    return max((expiration - today).days, 0)
