"""Dividend reinvestment (DRIP) projections and dividend income schedules"""

from datetime import timedelta
from typing import Dict, List, Sequence

from wealth_engine.domain.exceptions import InvalidInputError
from wealth_engine.domain.models import (
    DividendEvent,
    DividendFrequency,
    DripAdvantage,
    DripComparisonPoint,
    GrowthSnapshot,
    Holding,
    MonthlyIncome,
    PortfolioTotals,
)
from wealth_engine.utils.date_utils import add_months, month_bounds
from wealth_engine.utils.validation import (
    require_int,
    require_non_negative,
    require_positive,
    require_range,
    round_half_up,
)

MIN_YEARS = 1
MAX_YEARS = 30
MIN_GROWTH_RATE_PCT = 0.0
MAX_GROWTH_RATE_PCT = 20.0

# Share price appreciates at half the assumed dividend growth rate.
# A 5% dividend growth assumption therefore reprices shares by 2.5% a year.
PRICE_APPRECIATION_RATIO = 0.5

QUARTERLY_PAYMENT_MONTHS = (3, 6, 9, 12)
ANNUAL_PAYMENT_MONTH = 12
DEFAULT_PAYMENT_LAG_DAYS = 10
CALENDAR_WINDOW_MONTHS = 12


def _validate_projection_inputs(
    total_cost: float,
    total_shares: float,
    annual_dividend: float,
    years: int,
    growth_rate_pct: float,
) -> None:
    require_positive("total_cost", total_cost)
    require_positive("total_shares", total_shares)
    require_non_negative("annual_dividend", annual_dividend)
    require_int("years", years)
    require_range("years", years, MIN_YEARS, MAX_YEARS)
    require_range("growth_rate_pct", growth_rate_pct, MIN_GROWTH_RATE_PCT, MAX_GROWTH_RATE_PCT)


def _price_growth_factor(growth_rate_pct: float) -> float:
    return 1 + growth_rate_pct * PRICE_APPRECIATION_RATIO / 100


def project_drip(
    total_cost: float,
    total_shares: float,
    annual_dividend: float,
    years: int,
    growth_rate_pct: float,
) -> List[GrowthSnapshot]:
    """
    Project portfolio value with every dividend reinvested at the average price.

    Each year the snapshot is taken first, then:
    - dividends buy new shares at the current average price
    - dividends grow by growth_rate_pct
    - shares reprice at growth_rate_pct * PRICE_APPRECIATION_RATIO

    Returns years + 1 snapshots (year 0 is the starting state).

    Example:
        project_drip(30425, 535, 1668.52, 10, 5)[0].value == 30425
    """
    _validate_projection_inputs(total_cost, total_shares, annual_dividend, years, growth_rate_pct)

    value = total_cost
    shares = total_shares
    dividends = annual_dividend
    drip_shares = 0.0
    price_factor = _price_growth_factor(growth_rate_pct)

    snapshots = []
    for year in range(years + 1):
        snapshots.append(
            GrowthSnapshot(
                year=year,
                value=round_half_up(value),
                dividends=round_half_up(dividends),
                drip_shares=round_half_up(drip_shares),
            )
        )

        avg_price = value / shares
        new_shares = dividends / avg_price
        drip_shares += new_shares
        shares += new_shares

        dividends *= 1 + growth_rate_pct / 100
        value = shares * avg_price * price_factor

    return snapshots


def project_without_drip(
    total_cost: float,
    total_shares: float,
    annual_dividend: float,
    years: int,
    growth_rate_pct: float,
) -> List[GrowthSnapshot]:
    """Same recurrence as project_drip with dividends taken as cash"""
    _validate_projection_inputs(total_cost, total_shares, annual_dividend, years, growth_rate_pct)

    value = total_cost
    dividends = annual_dividend
    price_factor = _price_growth_factor(growth_rate_pct)

    snapshots = []
    for year in range(years + 1):
        snapshots.append(
            GrowthSnapshot(
                year=year,
                value=round_half_up(value),
                dividends=round_half_up(dividends),
                drip_shares=0,
            )
        )
        dividends *= 1 + growth_rate_pct / 100
        # Share count never changes, so repricing the average price reprices the whole position
        value *= price_factor

    return snapshots


def compare_drip(
    total_cost: float,
    total_shares: float,
    annual_dividend: float,
    years: int,
    growth_rate_pct: float,
) -> List[DripComparisonPoint]:
    """Run both paths from the same starting state, year by year"""
    with_drip = project_drip(total_cost, total_shares, annual_dividend, years, growth_rate_pct)
    without_drip = project_without_drip(total_cost, total_shares, annual_dividend, years, growth_rate_pct)

    return [
        DripComparisonPoint(
            year=drip.year,
            with_drip=drip.value,
            without_drip=cash.value,
            drip_dividends=drip.dividends,
            no_drip_dividends=cash.dividends,
        )
        for drip, cash in zip(with_drip, without_drip)
    ]


def drip_advantage(comparison: Sequence[DripComparisonPoint], total_cost: float) -> DripAdvantage:
    """Summarise the final year of a comparison"""
    if not comparison:
        raise InvalidInputError("Comparison must contain at least one year")
    require_positive("total_cost", total_cost)

    final = comparison[-1]
    # A zero cash value leaves nothing to compare against
    advantage_pct = 0.0
    if final.without_drip:
        advantage_pct = round((final.with_drip / final.without_drip - 1) * 100, 1)

    return DripAdvantage(
        years=final.year,
        with_drip=final.with_drip,
        without_drip=final.without_drip,
        advantage=final.with_drip - final.without_drip,
        advantage_pct=advantage_pct,
        with_drip_return_pct=round((final.with_drip - total_cost) / total_cost * 100, 1),
        without_drip_return_pct=round((final.without_drip - total_cost) / total_cost * 100, 1),
    )


def portfolio_totals(holdings: Sequence[Holding]) -> PortfolioTotals:
    total_cost = sum(h.cost_basis for h in holdings)
    total_shares = sum(h.shares for h in holdings)
    annual_income = sum(h.annual_income for h in holdings)
    average_yield = annual_income / total_cost * 100 if total_cost > 0 else 0.0

    return PortfolioTotals(
        total_cost=total_cost,
        total_shares=total_shares,
        annual_income=annual_income,
        monthly_income=annual_income / 12,
        average_yield=average_yield,
    )


def project_holdings(holdings: Sequence[Holding], years: int, growth_rate_pct: float) -> List[GrowthSnapshot]:
    """DRIP projection seeded from a portfolio's aggregate cost, shares and income"""
    if not holdings:
        raise InvalidInputError("Portfolio has no holdings to project")
    totals = portfolio_totals(holdings)
    return project_drip(totals.total_cost, totals.total_shares, totals.annual_income, years, growth_rate_pct)


def weighted_dividend_growth(holdings: Sequence[Holding]) -> float:
    """Cost-basis weighted average of each holding's dividend growth rate (missing rates count as 0)"""
    total_cost = sum(h.cost_basis for h in holdings)
    if total_cost == 0:
        return 0.0
    return sum((h.dividend_growth_rate or 0.0) * h.cost_basis / total_cost for h in holdings)


def _income_in_month(holding: Holding, month: int) -> float:
    if holding.frequency == DividendFrequency.MONTHLY:
        return holding.annual_income / 12
    if holding.frequency == DividendFrequency.QUARTERLY and month in QUARTERLY_PAYMENT_MONTHS:
        return holding.annual_income / 4
    if holding.frequency == DividendFrequency.ANNUALLY and month == ANNUAL_PAYMENT_MONTH:
        return holding.annual_income
    return 0.0


def monthly_income_breakdown(holdings: Sequence[Holding]) -> List[MonthlyIncome]:
    """Expected dividend cash per calendar month with per-symbol contributors"""
    breakdown = []
    for month in range(1, 13):
        contributors = []
        for holding in holdings:
            amount = _income_in_month(holding, month)
            if amount > 0:
                contributors.append((holding.symbol, amount))
        income = sum(amount for _, amount in contributors)
        breakdown.append(
            MonthlyIncome(month=month, income=round(income, 2), contributors=tuple(contributors))
        )
    return breakdown


def dividend_calendar(holdings: Sequence[Holding], year: int, month: int) -> List[DividendEvent]:
    """
    Ex-date and payment events falling inside one calendar month.

    Each holding's next ex-date is rolled backwards and forwards by its payment
    interval up to a year either way. Payment dates follow the holding's own
    payment date shifted by the same offset, or land DEFAULT_PAYMENT_LAG_DAYS
    after the ex-date when none is known.
    """
    require_int("year", year)
    require_int("month", month)
    require_range("month", month, 1, 12)
    start, end = month_bounds(year, month)

    events = []
    for holding in holdings:
        if holding.next_ex_date is None:
            continue

        per_payment = holding.annual_income / holding.frequency.payments_per_year
        step = holding.frequency.months_between_payments

        for offset in range(-CALENDAR_WINDOW_MONTHS, CALENDAR_WINDOW_MONTHS + 1, step):
            ex_date = add_months(holding.next_ex_date, offset)
            if start <= ex_date <= end:
                events.append(DividendEvent(date=ex_date, symbol=holding.symbol, kind="ex-date", amount=per_payment))

            if holding.payment_date is not None:
                pay_date = add_months(holding.payment_date, offset)
            else:
                pay_date = ex_date + timedelta(days=DEFAULT_PAYMENT_LAG_DAYS)
            if start <= pay_date <= end:
                events.append(DividendEvent(date=pay_date, symbol=holding.symbol, kind="payment", amount=per_payment))

    events.sort(key=lambda e: e.date)
    return events


def dividend_totals_by_symbol(holdings: Sequence[Holding]) -> Dict[str, float]:
    """Annual dividend income per symbol, largest first"""
    ranked = sorted(holdings, key=lambda h: h.annual_income, reverse=True)
    return {h.symbol: h.annual_income for h in ranked}
