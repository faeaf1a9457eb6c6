"""POST /v1/retirement/* - retirement projection, crossover point and wealth multiplier"""

from fastapi import APIRouter, Depends

from wealth_engine.api.dependencies import get_request_id, get_wealth_multiplier_default
from wealth_engine.api.tracking import tracked_calculation
from wealth_engine.api.v1.schemas import (
    CrossoverPointSchema,
    CrossoverRequest,
    CrossoverResponse,
    FireNumbersSchema,
    RetirementPointSchema,
    RetirementProjectionRequest,
    RetirementProjectionResponse,
    WealthMultiplierPointSchema,
    WealthMultiplierRequest,
    WealthMultiplierResponse,
)
from wealth_engine.domain.models import RetirementPhase
from wealth_engine.domain.retirement import (
    coast_fire_number,
    find_crossover,
    fire_numbers,
    project_retirement,
    project_wealth_multiplier,
    retirement_readiness,
)
from wealth_engine.infrastructure.observability.metrics import crossover_unreached_counter

router = APIRouter()


@router.post("/retirement/projection", response_model=RetirementProjectionResponse)
def create_retirement_projection(
    request_body: RetirementProjectionRequest,
    request_id: str = Depends(get_request_id),
):
    """
    Accumulation and retirement balances by age with FIRE targets.

    depleted_at_age is the first retirement age at which the portfolio is
    empty, or null if it lasts the whole horizon.
    """
    with tracked_calculation(request_id, "retirement_projection") as log_fields:
        points = project_retirement(
            request_body.current_age,
            request_body.retirement_age,
            request_body.current_savings,
            request_body.monthly_contribution,
            request_body.expected_return_pct,
            request_body.inflation_pct,
            request_body.annual_spending_at_retirement,
        )
        targets = fire_numbers(request_body.annual_spending_at_retirement)
        readiness = retirement_readiness(
            request_body.current_age,
            request_body.retirement_age,
            request_body.current_savings,
            request_body.monthly_contribution,
            request_body.expected_return_pct,
            request_body.annual_spending_at_retirement,
        )
        coast = coast_fire_number(
            targets.standard,
            request_body.current_age,
            request_body.retirement_age,
            request_body.expected_return_pct,
        )
        depleted_at_age = next(
            (p.age for p in points if p.phase == RetirementPhase.RETIREMENT and p.portfolio == 0),
            None,
        )

        log_fields.update(points=len(points), depleted=depleted_at_age is not None)

        return RetirementProjectionResponse(
            points=[RetirementPointSchema(age=p.age, portfolio=p.portfolio, phase=p.phase.value) for p in points],
            fire_numbers=FireNumbersSchema(
                standard=targets.standard,
                lean=targets.lean,
                fat=targets.fat,
                barista=targets.barista,
                coast=coast,
            ),
            portfolio_at_retirement=readiness.portfolio_at_retirement,
            portfolio_can_support=readiness.portfolio_can_support,
            depleted_at_age=depleted_at_age,
        )


@router.post("/retirement/crossover", response_model=CrossoverResponse)
def create_crossover(
    request_body: CrossoverRequest,
    request_id: str = Depends(get_request_id),
):
    """Year in which passive income first covers expenses (null if not within 40 years)"""
    with tracked_calculation(request_id, "crossover") as log_fields:
        result = find_crossover(
            current_savings=request_body.current_savings,
            annual_expenses=request_body.monthly_expenses * 12,
            monthly_investment=request_body.monthly_investment,
            expected_return_pct=request_body.expected_return_pct,
            withdrawal_rate_pct=request_body.withdrawal_rate_pct,
        )
        if not result.reached:
            crossover_unreached_counter.inc()
        log_fields.update(crossover_year=result.crossover_year)

        return CrossoverResponse(
            crossover_year=result.crossover_year,
            points=[CrossoverPointSchema(**vars(p)) for p in result.points],
        )


@router.post("/retirement/wealth-multiplier", response_model=WealthMultiplierResponse)
def create_wealth_multiplier(
    request_body: WealthMultiplierRequest,
    request_id: str = Depends(get_request_id),
    default_multiplier: float = Depends(get_wealth_multiplier_default),
):
    """Future value of a yearly contribution using the age-based multiplier table"""
    with tracked_calculation(request_id, "wealth_multiplier") as log_fields:
        result = project_wealth_multiplier(
            request_body.current_age,
            request_body.retirement_age,
            request_body.annual_contribution,
            default=default_multiplier,
        )
        log_fields.update(used_fallback=result.used_fallback)

        return WealthMultiplierResponse(
            age=result.age,
            multiplier=result.multiplier,
            future_value=result.future_value,
            used_fallback=result.used_fallback,
            points=[WealthMultiplierPointSchema(**vars(p)) for p in result.points],
        )
