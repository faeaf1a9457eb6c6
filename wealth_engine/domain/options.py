"""Option probability engine - expected move, ITM/POP probabilities, Greeks and risk flags"""

import math
from datetime import date
from typing import Optional, Sequence

from wealth_engine.domain.exceptions import InvalidInputError
from wealth_engine.domain.models import (
    Greeks,
    OptionMetrics,
    OptionParameters,
    OptionType,
    RiskAssessment,
    RiskFlag,
    RiskSummary,
    RiskThresholds,
)
from wealth_engine.utils.date_utils import days_to_expiration
from wealth_engine.utils.validation import (
    require_finite,
    require_int,
    require_non_negative,
    require_positive,
    require_range,
)

DAYS_PER_YEAR = 365
TRADING_HOURS_PER_DAY = 6.5
MIN_YEARS_TO_EXPIRY = 1e-6  # floor so 0 DTE never divides by zero
MAX_IMPLIED_VOLATILITY = 5.0  # 500%

# Abramowitz & Stegun 7.1.26
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911


def erf(x: float) -> float:
    """Rational approximation of the error function, max absolute error ~1.5e-7"""
    sign = -1.0 if x < 0 else 1.0
    x = abs(x)
    t = 1.0 / (1.0 + _P * x)
    y = 1.0 - (((((_A5 * t + _A4) * t) + _A3) * t + _A2) * t + _A1) * t * math.exp(-x * x)
    return sign * y


def norm_cdf(x: float) -> float:
    """Standard normal cumulative distribution"""
    return 0.5 * (1.0 + erf(x / math.sqrt(2.0)))


def norm_pdf(x: float) -> float:
    return math.exp(-0.5 * x * x) / math.sqrt(2.0 * math.pi)


def parse_option_type(value) -> OptionType:
    try:
        return OptionType(value)
    except ValueError:
        raise InvalidInputError(f"Unknown option type: {value!r}") from None


def resolve_days_to_expiry(
    days_to_expiry: Optional[int] = None,
    expiration_date: Optional[date] = None,
    today: Optional[date] = None,
) -> int:
    """Calendar days left, counted from expiration_date when one is given"""
    if expiration_date is not None:
        return days_to_expiration(expiration_date, today)
    if days_to_expiry is None:
        raise InvalidInputError("Either days_to_expiry or expiration_date is required")
    require_int("days_to_expiry", days_to_expiry)
    return require_non_negative("days_to_expiry", days_to_expiry)


def _validate(params: OptionParameters) -> OptionType:
    require_positive("underlying_price", params.underlying_price)
    require_positive("strike", params.strike)
    require_non_negative("premium", params.premium)
    require_non_negative("days_to_expiry", params.days_to_expiry)
    require_finite("hourly_theta", params.hourly_theta)
    require_finite("implied_volatility", params.implied_volatility)
    if params.implied_volatility <= 0:
        raise InvalidInputError("implied_volatility must be greater than 0")
    require_range("implied_volatility", params.implied_volatility, 0.0, MAX_IMPLIED_VOLATILITY)
    return parse_option_type(params.option_type)


def _probability_above(threshold: float, price: float, expected_move: float) -> float:
    """P(price at expiry > threshold) under a normal move of one expected_move"""
    return norm_cdf((price - threshold) / expected_move)


def evaluate_option(params: OptionParameters) -> OptionMetrics:
    """
    Approximate expiry probabilities for a single option.

    The terminal price is treated as normal around the current price with a
    one-sigma move of S * IV * sqrt(T). Calls are in the money above the
    strike and profitable above strike + premium; puts mirror both.

    Raises:
        InvalidInputError: non-positive price/strike, negative premium or days
        ParameterOutOfRangeError: implied volatility above MAX_IMPLIED_VOLATILITY
    """
    option_type = _validate(params)
    price = params.underlying_price
    strike = params.strike
    premium = params.premium

    years = max(params.days_to_expiry / DAYS_PER_YEAR, MIN_YEARS_TO_EXPIRY)
    expected_move = price * params.implied_volatility * math.sqrt(years)
    if expected_move <= 0:
        raise InvalidInputError("Expected move is zero; check price, volatility and expiry")

    d = (price - strike) / expected_move
    above_strike = norm_cdf(d)

    if option_type == OptionType.CALL:
        prob_itm = above_strike
        breakeven = strike + premium
        prob_profit = _probability_above(breakeven, price, expected_move)
        delta = prob_itm
        intrinsic = max(0.0, price - strike)
    else:
        prob_itm = 1.0 - above_strike
        breakeven = strike - premium
        prob_profit = 1.0 - _probability_above(breakeven, price, expected_move)
        delta = -prob_itm
        intrinsic = max(0.0, strike - price)

    return OptionMetrics(
        years_to_expiry=years,
        expected_move=expected_move,
        lower_bound=price - expected_move,
        upper_bound=price + expected_move,
        breakeven=breakeven,
        prob_itm=prob_itm,
        prob_profit=prob_profit,
        delta=delta,
        gamma=norm_pdf(d) / expected_move,
        intrinsic_value=intrinsic,
        time_value=premium - intrinsic,
        hourly_theta=params.hourly_theta,
        daily_theta_impact=params.hourly_theta * TRADING_HOURS_PER_DAY,
    )


def is_out_of_the_money(params: OptionParameters) -> bool:
    if parse_option_type(params.option_type) == OptionType.CALL:
        return params.underlying_price < params.strike
    return params.underlying_price > params.strike


def classify_risk(
    params: OptionParameters,
    metrics: OptionMetrics,
    thresholds: RiskThresholds = RiskThresholds(),
    historical_volatility: Optional[float] = None,
) -> RiskFlag:
    """
    Bucket a position for a premium seller.

    - Safe: out of the money, prob_itm below safe_prob_itm, and implied
      volatility at least min_iv_to_hv_ratio times historical volatility
      (the volatility check is skipped when no historical figure is known)
    - Risky: prob_itm above risky_prob_itm
    - Neutral: everything else
    """
    if metrics.prob_itm > thresholds.risky_prob_itm:
        return RiskFlag.RISKY

    vol_ok = True
    if historical_volatility is not None:
        require_positive("historical_volatility", historical_volatility)
        vol_ok = params.implied_volatility / historical_volatility >= thresholds.min_iv_to_hv_ratio

    if is_out_of_the_money(params) and metrics.prob_itm < thresholds.safe_prob_itm and vol_ok:
        return RiskFlag.SAFE
    return RiskFlag.NEUTRAL


def assess_position(
    symbol: str,
    params: OptionParameters,
    thresholds: RiskThresholds = RiskThresholds(),
    historical_volatility: Optional[float] = None,
) -> RiskAssessment:
    metrics = evaluate_option(params)
    flag = classify_risk(params, metrics, thresholds, historical_volatility)
    return RiskAssessment(symbol=symbol.upper(), parameters=params, metrics=metrics, flag=flag)


def summarize_risk(assessments: Sequence[RiskAssessment]) -> RiskSummary:
    flags = [a.flag for a in assessments]
    average = sum(a.metrics.prob_itm for a in assessments) / len(assessments) if assessments else 0.0
    return RiskSummary(
        safe_count=flags.count(RiskFlag.SAFE),
        neutral_count=flags.count(RiskFlag.NEUTRAL),
        risky_count=flags.count(RiskFlag.RISKY),
        average_prob_itm=average,
    )


def black_scholes_greeks(
    underlying_price: float,
    strike: float,
    years_to_expiry: float,
    risk_free_rate: float,
    volatility: float,
    option_type: OptionType,
) -> Greeks:
    """
    Black-Scholes Greeks for a European option.

    Rates and volatility are decimals. Theta is per calendar day; vega and rho
    are per one percentage point.
    """
    option_type = parse_option_type(option_type)
    require_positive("underlying_price", underlying_price)
    require_positive("strike", strike)
    require_positive("years_to_expiry", years_to_expiry)
    require_positive("volatility", volatility)
    require_range("volatility", volatility, 0.0, MAX_IMPLIED_VOLATILITY)
    require_finite("risk_free_rate", risk_free_rate)

    S, K, T, r, sigma = underlying_price, strike, years_to_expiry, risk_free_rate, volatility
    sqrt_t = math.sqrt(T)
    d1 = (math.log(S / K) + (r + sigma * sigma / 2) * T) / (sigma * sqrt_t)
    d2 = d1 - sigma * sqrt_t

    pdf_d1 = norm_pdf(d1)
    discount = math.exp(-r * T)
    decay = -(S * pdf_d1 * sigma) / (2 * sqrt_t)

    if option_type == OptionType.CALL:
        delta = norm_cdf(d1)
        theta = (decay - r * K * discount * norm_cdf(d2)) / DAYS_PER_YEAR
        rho = K * T * discount * norm_cdf(d2) / 100
    else:
        delta = norm_cdf(d1) - 1
        theta = (decay + r * K * discount * norm_cdf(-d2)) / DAYS_PER_YEAR
        rho = -K * T * discount * norm_cdf(-d2) / 100

    return Greeks(
        delta=delta,
        gamma=pdf_d1 / (S * sigma * sqrt_t),
        theta=theta,
        vega=S * pdf_d1 * sqrt_t / 100,
        rho=rho,
    )
