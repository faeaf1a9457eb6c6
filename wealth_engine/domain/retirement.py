"""Retirement and FIRE projections - accumulation/decumulation, crossover point, wealth multiplier"""

from types import MappingProxyType
from typing import List, Mapping, Tuple

from wealth_engine.domain.exceptions import ParameterOutOfRangeError
from wealth_engine.domain.models import (
    CoastFirePoint,
    CrossoverPoint,
    CrossoverResult,
    FireNumbers,
    RetirementPhase,
    RetirementProjectionPoint,
    RetirementReadiness,
    WealthMultiplierPoint,
    WealthMultiplierResult,
)
from wealth_engine.utils.validation import (
    require_finite,
    require_int,
    require_non_negative,
    require_range,
    round_half_up,
)

YEARS_IN_RETIREMENT = 30
CROSSOVER_HORIZON_YEARS = 40
MAX_AGE = 120

STANDARD_FIRE_MULTIPLE = 25
LEAN_FIRE_MULTIPLE = 20
FAT_FIRE_MULTIPLE = 33.33
BARISTA_FIRE_MULTIPLE = 20
BARISTA_SPENDING_SHARE = 0.6  # part-time work covers the other 40%

# Growth of $1 invested at a given age and left until 65 at 10% a year
WEALTH_MULTIPLIER_RETURN = 0.10
DEFAULT_WEALTH_MULTIPLIER = 50
WEALTH_MULTIPLIERS: Mapping[int, int] = MappingProxyType({
    20: 88, 21: 83, 22: 79, 23: 74, 24: 70, 25: 66, 26: 63, 27: 59, 28: 56, 29: 53,
    30: 50, 31: 47, 32: 44, 33: 42, 34: 40, 35: 37, 36: 35, 37: 33, 38: 31, 39: 30,
    40: 28, 41: 26, 42: 25, 43: 23, 44: 22, 45: 21, 46: 19, 47: 18, 48: 17, 49: 16,
    50: 15, 51: 14, 52: 13, 53: 13, 54: 12, 55: 11, 56: 10, 57: 10, 58: 9, 59: 9,
    60: 8, 61: 8, 62: 7, 63: 7, 64: 6, 65: 6,
})


def _validate_ages(current_age: int, retirement_age: int) -> None:
    require_int("current_age", current_age)
    require_int("retirement_age", retirement_age)
    require_range("current_age", current_age, 0, MAX_AGE)
    require_range("retirement_age", retirement_age, 0, MAX_AGE)
    if retirement_age < current_age:
        raise ParameterOutOfRangeError(
            f"retirement_age ({retirement_age}) must not be before current_age ({current_age})"
        )


def _validate_return(name: str, pct: float) -> None:
    require_finite(name, pct)
    if pct <= -100:
        raise ParameterOutOfRangeError(f"{name} must be above -100%, got {pct}")


def _grow_monthly(balance: float, monthly_return: float, monthly_contribution: float, months: int) -> float:
    for _ in range(months):
        balance = balance * (1 + monthly_return) + monthly_contribution
    return balance


def project_retirement(
    current_age: int,
    retirement_age: int,
    current_savings: float,
    monthly_contribution: float,
    expected_return_pct: float,
    inflation_pct: float,
    annual_spending_at_retirement: float,
    years_in_retirement: int = YEARS_IN_RETIREMENT,
) -> List[RetirementProjectionPoint]:
    """
    Year-by-year portfolio balance from current_age to retirement_age + years_in_retirement.

    Before retirement the balance compounds monthly with contributions. From
    retirement on, each year withdraws the inflation-adjusted spending and then
    grows at the real return (expected - inflation). A depleted portfolio stays
    at 0 and the sequence keeps going so every age has a point.
    """
    _validate_ages(current_age, retirement_age)
    require_non_negative("current_savings", current_savings)
    require_non_negative("monthly_contribution", monthly_contribution)
    require_non_negative("annual_spending_at_retirement", annual_spending_at_retirement)
    require_int("years_in_retirement", years_in_retirement)
    require_range("years_in_retirement", years_in_retirement, 0, MAX_AGE)
    _validate_return("expected_return_pct", expected_return_pct)
    _validate_return("inflation_pct", inflation_pct)

    monthly_return = expected_return_pct / 100 / 12
    real_return = expected_return_pct - inflation_pct
    savings = current_savings

    points = []
    for age in range(current_age, retirement_age + years_in_retirement + 1):
        retired = age >= retirement_age
        points.append(
            RetirementProjectionPoint(
                age=age,
                portfolio=round_half_up(savings),
                phase=RetirementPhase.RETIREMENT if retired else RetirementPhase.ACCUMULATION,
            )
        )

        if not retired:
            savings = _grow_monthly(savings, monthly_return, monthly_contribution, 12)
        else:
            years_retired = age - retirement_age
            adjusted_spending = annual_spending_at_retirement * (1 + inflation_pct / 100) ** years_retired
            savings = max(0.0, (savings - adjusted_spending) * (1 + real_return / 100))

    return points


def fire_numbers(annual_spending: float) -> FireNumbers:
    """Portfolio targets as fixed multiples of the same annual spending"""
    require_non_negative("annual_spending", annual_spending)
    return FireNumbers(
        annual_spending=annual_spending,
        standard=annual_spending * STANDARD_FIRE_MULTIPLE,
        lean=annual_spending * LEAN_FIRE_MULTIPLE,
        fat=annual_spending * FAT_FIRE_MULTIPLE,
        barista=annual_spending * BARISTA_SPENDING_SHARE * BARISTA_FIRE_MULTIPLE,
    )


def coast_fire_number(target: float, current_age: int, retirement_age: int, expected_return_pct: float) -> float:
    """Amount needed today to reach target by retirement_age with no further contributions"""
    require_non_negative("target", target)
    _validate_ages(current_age, retirement_age)
    _validate_return("expected_return_pct", expected_return_pct)
    return target / (1 + expected_return_pct / 100) ** (retirement_age - current_age)


def coast_fire_by_age(
    target: float,
    retirement_age: int,
    expected_return_pct: float,
    from_age: int = 20,
) -> List[CoastFirePoint]:
    require_int("from_age", from_age)
    require_int("retirement_age", retirement_age)
    return [
        CoastFirePoint(
            age=age,
            coast_amount=round_half_up(coast_fire_number(target, age, retirement_age, expected_return_pct)),
        )
        for age in range(from_age, retirement_age + 1)
    ]


def find_crossover(
    current_savings: float,
    annual_expenses: float,
    monthly_investment: float,
    expected_return_pct: float,
    withdrawal_rate_pct: float,
    horizon_years: int = CROSSOVER_HORIZON_YEARS,
) -> CrossoverResult:
    """
    First year in which withdrawals at withdrawal_rate_pct cover annual_expenses.

    Savings compound monthly with contributions. crossover_year is None when
    the horizon ends first; that is an ordinary result, not an error.
    """
    require_non_negative("current_savings", current_savings)
    require_non_negative("annual_expenses", annual_expenses)
    require_non_negative("monthly_investment", monthly_investment)
    require_int("horizon_years", horizon_years)
    require_range("horizon_years", horizon_years, 0, MAX_AGE)
    _validate_return("expected_return_pct", expected_return_pct)
    require_finite("withdrawal_rate_pct", withdrawal_rate_pct)
    if not 0 < withdrawal_rate_pct <= 100:
        raise ParameterOutOfRangeError(f"withdrawal_rate_pct must be in (0, 100], got {withdrawal_rate_pct}")

    withdrawal_rate = withdrawal_rate_pct / 100
    monthly_return = expected_return_pct / 100 / 12
    target_savings = annual_expenses / withdrawal_rate
    savings = current_savings
    crossover_year = None

    points = []
    for year in range(horizon_years + 1):
        passive_income = savings * withdrawal_rate
        if crossover_year is None and passive_income >= annual_expenses:
            crossover_year = year

        points.append(
            CrossoverPoint(
                year=year,
                savings=round_half_up(savings),
                passive_income=round_half_up(passive_income),
                expenses=annual_expenses,
                target_savings=round_half_up(target_savings),
            )
        )
        savings = _grow_monthly(savings, monthly_return, monthly_investment, 12)

    return CrossoverResult(points=points, crossover_year=crossover_year)


def wealth_multiplier(
    age: int,
    table: Mapping[int, float] = WEALTH_MULTIPLIERS,
    default: float = DEFAULT_WEALTH_MULTIPLIER,
) -> Tuple[float, bool]:
    """Multiplier for an age and whether the table had no entry (default used)"""
    if age in table:
        return table[age], False
    return default, True


def project_wealth_multiplier(
    current_age: int,
    retirement_age: int,
    annual_contribution: float,
    table: Mapping[int, float] = WEALTH_MULTIPLIERS,
    default: float = DEFAULT_WEALTH_MULTIPLIER,
) -> WealthMultiplierResult:
    """
    Future value of one year's contribution via the multiplier table, plus the
    path of contributing every year at WEALTH_MULTIPLIER_RETURN.

    Ages outside the table use `default` and set used_fallback.
    """
    _validate_ages(current_age, retirement_age)
    require_non_negative("annual_contribution", annual_contribution)

    multiplier, used_fallback = wealth_multiplier(current_age, table, default)

    points = []
    accumulated = 0.0
    for age in range(current_age, retirement_age + 1):
        accumulated = accumulated * (1 + WEALTH_MULTIPLIER_RETURN) + annual_contribution
        points.append(
            WealthMultiplierPoint(
                age=age,
                accumulated=round_half_up(accumulated),
                contributions=(age - current_age + 1) * annual_contribution,
            )
        )

    return WealthMultiplierResult(
        age=current_age,
        multiplier=multiplier,
        future_value=annual_contribution * multiplier,
        used_fallback=used_fallback,
        points=points,
    )


def retirement_readiness(
    current_age: int,
    retirement_age: int,
    current_savings: float,
    monthly_contribution: float,
    expected_return_pct: float,
    annual_spending: float,
) -> RetirementReadiness:
    """Balance at retirement and whether it reaches the standard FIRE number"""
    _validate_ages(current_age, retirement_age)
    require_non_negative("current_savings", current_savings)
    require_non_negative("monthly_contribution", monthly_contribution)
    require_non_negative("annual_spending", annual_spending)
    _validate_return("expected_return_pct", expected_return_pct)

    years = retirement_age - current_age
    balance = _grow_monthly(current_savings, expected_return_pct / 100 / 12, monthly_contribution, years * 12)

    return RetirementReadiness(
        portfolio_at_retirement=balance,
        annual_withdrawal=annual_spending,
        monthly_income=annual_spending / 12,
        years_to_retirement=years,
        portfolio_can_support=balance >= fire_numbers(annual_spending).standard,
    )
