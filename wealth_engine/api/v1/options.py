"""POST /v1/options/* - option probability and Greeks endpoints"""

from fastapi import APIRouter, Depends

from wealth_engine.api.dependencies import get_request_id, get_risk_thresholds
from wealth_engine.api.tracking import tracked_calculation
from wealth_engine.api.v1.schemas import (
    GreeksRequest,
    GreeksResponse,
    OptionEvaluationRequest,
    OptionEvaluationResponse,
)
from wealth_engine.domain.models import OptionParameters, OptionType, RiskThresholds
from wealth_engine.domain.options import (
    DAYS_PER_YEAR,
    assess_position,
    black_scholes_greeks,
    resolve_days_to_expiry,
)
from wealth_engine.infrastructure.observability.metrics import risk_flag_counter

router = APIRouter()


@router.post("/options/evaluate", response_model=OptionEvaluationResponse)
def evaluate_option_position(
    request_body: OptionEvaluationRequest,
    request_id: str = Depends(get_request_id),
    thresholds: RiskThresholds = Depends(get_risk_thresholds),
):
    """Expected move, probability ITM / of profit, delta, gamma and a risk flag"""
    with tracked_calculation(request_id, "option_evaluation") as log_fields:
        params = OptionParameters(
            underlying_price=request_body.underlying_price,
            strike=request_body.strike,
            implied_volatility=request_body.implied_volatility,
            days_to_expiry=resolve_days_to_expiry(request_body.days_to_expiry, request_body.expiration_date),
            option_type=OptionType(request_body.option_type),
            premium=request_body.premium,
            hourly_theta=request_body.hourly_theta,
        )
        assessment = assess_position(
            request_body.symbol, params, thresholds, request_body.historical_volatility
        )
        metrics = assessment.metrics

        risk_flag_counter.labels(flag=assessment.flag.value).inc()
        log_fields.update(option_type=params.option_type.value, risk_flag=assessment.flag.value)

        return OptionEvaluationResponse(
            symbol=assessment.symbol,
            expected_move=metrics.expected_move,
            lower_bound=metrics.lower_bound,
            upper_bound=metrics.upper_bound,
            breakeven=metrics.breakeven,
            prob_itm=metrics.prob_itm,
            prob_profit=metrics.prob_profit,
            delta=metrics.delta,
            gamma=metrics.gamma,
            intrinsic_value=metrics.intrinsic_value,
            time_value=metrics.time_value,
            daily_theta_impact=metrics.daily_theta_impact,
            risk_flag=assessment.flag.value,
        )


@router.post("/options/greeks", response_model=GreeksResponse)
def calculate_greeks(
    request_body: GreeksRequest,
    request_id: str = Depends(get_request_id),
):
    """Black-Scholes delta, gamma, theta (per day), vega and rho (per 1%)"""
    with tracked_calculation(request_id, "option_greeks"):
        days = resolve_days_to_expiry(request_body.days_to_expiry, request_body.expiration_date)
        greeks = black_scholes_greeks(
            request_body.underlying_price,
            request_body.strike,
            days / DAYS_PER_YEAR,
            request_body.risk_free_rate,
            request_body.volatility,
            OptionType(request_body.option_type),
        )
        return GreeksResponse(**vars(greeks))
