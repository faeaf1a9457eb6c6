"""POST /v1/drip/projection - dividend reinvestment projection"""

from fastapi import APIRouter, Depends

from wealth_engine.api.dependencies import get_request_id
from wealth_engine.api.tracking import tracked_calculation
from wealth_engine.api.v1.schemas import (
    DripComparisonSchema,
    DripProjectionRequest,
    DripProjectionResponse,
    GrowthSnapshotSchema,
    MonthlyIncomeSchema,
)
from wealth_engine.domain.drip import (
    compare_drip,
    drip_advantage,
    dividend_totals_by_symbol,
    monthly_income_breakdown,
    portfolio_totals,
    project_drip,
    weighted_dividend_growth,
)
from wealth_engine.domain.models import DividendFrequency, Holding

router = APIRouter()


@router.post("/drip/projection", response_model=DripProjectionResponse)
def create_drip_projection(
    request_body: DripProjectionRequest,
    request_id: str = Depends(get_request_id),
):
    """
    Project a dividend portfolio with and without reinvestment.

    Flow:
    1. Aggregate holdings into total cost, shares and annual income
    2. Run the DRIP projection
    3. Run the DRIP vs cash comparison from the same starting state
    4. Report the final-year DRIP advantage
    """
    with tracked_calculation(request_id, "drip_projection") as log_fields:
        holdings = [
            Holding(
                symbol=h.symbol.upper(),
                shares=h.shares,
                cost_basis=h.cost_basis,
                annual_dividend=h.annual_dividend,
                frequency=DividendFrequency(h.frequency),
                next_ex_date=h.next_ex_date,
                payment_date=h.payment_date,
                drip_enabled=h.drip_enabled,
                dividend_growth_rate=h.dividend_growth_rate,
            )
            for h in request_body.holdings
        ]
        totals = portfolio_totals(holdings)
        args = (
            totals.total_cost,
            totals.total_shares,
            totals.annual_income,
            request_body.years,
            request_body.growth_rate_pct,
        )
        projection = project_drip(*args)
        comparison = compare_drip(*args)
        advantage = drip_advantage(comparison, totals.total_cost)

        log_fields.update(holdings=len(holdings), years=request_body.years)

        return DripProjectionResponse(
            total_cost=totals.total_cost,
            annual_income=totals.annual_income,
            monthly_income=totals.monthly_income,
            average_yield=totals.average_yield,
            weighted_dividend_growth=weighted_dividend_growth(holdings),
            projection=[GrowthSnapshotSchema(**vars(s)) for s in projection],
            comparison=[DripComparisonSchema(**vars(p)) for p in comparison],
            drip_advantage=advantage.advantage,
            drip_advantage_pct=advantage.advantage_pct,
            monthly_breakdown=[
                MonthlyIncomeSchema(month=m.month, income=m.income) for m in monthly_income_breakdown(holdings)
            ],
            income_by_symbol=dividend_totals_by_symbol(holdings),
        )
