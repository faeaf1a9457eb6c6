"""Pydantic schemas for API request/response validation"""

from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


# DRIP


class HoldingSchema(BaseModel):
    """One dividend position"""

    symbol: str = Field(..., min_length=1, max_length=12)
    shares: float = Field(..., ge=0)
    cost_basis: float = Field(..., ge=0, description="Total cost of the position")
    annual_dividend: float = Field(..., ge=0, description="Annual dividend per share")
    frequency: Literal["monthly", "quarterly", "annually"] = "quarterly"
    next_ex_date: Optional[date] = None
    payment_date: Optional[date] = None
    drip_enabled: bool = True
    dividend_growth_rate: Optional[float] = None


class DripProjectionRequest(BaseModel):
    """Request body for POST /v1/drip/projection"""

    holdings: List[HoldingSchema] = Field(..., min_length=1)
    years: int = Field(10, description="Projection length, 1-30")
    growth_rate_pct: float = Field(5.0, description="Annual dividend growth, 0-20")


class GrowthSnapshotSchema(BaseModel):
    year: int
    value: int
    dividends: int
    drip_shares: int


class DripComparisonSchema(BaseModel):
    year: int
    with_drip: int
    without_drip: int
    drip_dividends: int
    no_drip_dividends: int


class MonthlyIncomeSchema(BaseModel):
    month: int
    income: float


class DripProjectionResponse(BaseModel):
    """Response for POST /v1/drip/projection"""

    total_cost: float
    annual_income: float
    monthly_income: float
    average_yield: float
    weighted_dividend_growth: float
    projection: List[GrowthSnapshotSchema]
    comparison: List[DripComparisonSchema]
    drip_advantage: int
    drip_advantage_pct: float
    monthly_breakdown: List[MonthlyIncomeSchema]
    income_by_symbol: Dict[str, float]


# Options


class OptionEvaluationRequest(BaseModel):
    """Request body for POST /v1/options/evaluate"""

    symbol: str = Field("", max_length=12)
    underlying_price: float = Field(..., gt=0)
    strike: float = Field(..., gt=0)
    implied_volatility: float = Field(..., gt=0, description="Decimal, 0.30 for 30%")
    days_to_expiry: Optional[int] = Field(None, ge=0)
    expiration_date: Optional[date] = Field(None, description="Used instead of days_to_expiry when given")
    option_type: Literal["call", "put"]
    premium: float = Field(0.0, ge=0)
    hourly_theta: float = 0.0
    historical_volatility: Optional[float] = Field(None, gt=0)


class OptionEvaluationResponse(BaseModel):
    """Response for POST /v1/options/evaluate"""

    symbol: str
    expected_move: float
    lower_bound: float
    upper_bound: float
    breakeven: float
    prob_itm: float
    prob_profit: float
    delta: float
    gamma: float
    intrinsic_value: float
    time_value: float
    daily_theta_impact: float
    risk_flag: str


class GreeksRequest(BaseModel):
    """Request body for POST /v1/options/greeks"""

    underlying_price: float = Field(..., gt=0)
    strike: float = Field(..., gt=0)
    days_to_expiry: Optional[int] = Field(None, gt=0)
    expiration_date: Optional[date] = Field(None, description="Used instead of days_to_expiry when given")
    risk_free_rate: float = Field(0.05, description="Decimal")
    volatility: float = Field(..., gt=0, description="Decimal")
    option_type: Literal["call", "put"]


class GreeksResponse(BaseModel):
    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float


# Paycheck


class DeductionSchema(BaseModel):
    label: str = Field("Deduction", max_length=100)
    value: float = Field(..., ge=0)
    kind: Literal["percentage", "amount"] = "amount"


class PaycheckRequest(BaseModel):
    """Request body for POST /v1/paycheck"""

    gross_pay: float = Field(..., gt=0)
    pay_frequency: str = "biweekly"
    filing_status: str = "single"
    zip_code: Optional[str] = Field(None, pattern=r"^\d{5}$")
    allowances: int = 0
    pre_tax_deductions: List[DeductionSchema] = Field(default_factory=list, max_length=20)
    post_tax_deductions: List[DeductionSchema] = Field(default_factory=list, max_length=20)


class TaxBreakdownSchema(BaseModel):
    federal_tax: float
    state_tax: float
    local_tax: float
    social_security: float
    medicare: float
    federal_rate: float
    state_rate: float
    local_rate: float
    marginal_rate: float


class YearlyPaycheckSchema(BaseModel):
    periods: int
    gross_income: float
    taxable_income: float
    federal_tax: float
    social_security: float
    medicare: float
    total_taxes: float
    net_pay: float


class BracketSliceSchema(BaseModel):
    rate: float
    lower: float
    upper: Optional[float]
    taxable_amount: float
    tax_amount: float
    is_current: bool


class EmployerMatchSchema(BaseModel):
    annual_employee_contribution: float
    annual_employer_base: float
    annual_employer_match: float
    annual_employer_total: float
    total_annual_retirement: float


class PaycheckResponse(BaseModel):
    """Response for POST /v1/paycheck"""

    gross_pay: float
    pre_tax_deductions: float
    taxable_income: float
    taxes: TaxBreakdownSchema
    total_taxes: float
    post_tax_deductions: float
    net_pay: float
    over_deducted: bool
    shortfall: float
    yearly: YearlyPaycheckSchema
    brackets: List[BracketSliceSchema]
    employer_match: EmployerMatchSchema


# Retirement


class RetirementProjectionRequest(BaseModel):
    """Request body for POST /v1/retirement/projection"""

    current_age: int = Field(..., ge=0)
    retirement_age: int = Field(..., ge=0)
    current_savings: float = Field(0.0, ge=0)
    monthly_contribution: float = Field(0.0, ge=0)
    expected_return_pct: float = 7.0
    inflation_pct: float = 2.5
    annual_spending_at_retirement: float = Field(..., ge=0)


class RetirementPointSchema(BaseModel):
    age: int
    portfolio: int
    phase: str


class FireNumbersSchema(BaseModel):
    standard: float
    lean: float
    fat: float
    barista: float
    coast: float


class RetirementProjectionResponse(BaseModel):
    """Response for POST /v1/retirement/projection"""

    points: List[RetirementPointSchema]
    fire_numbers: FireNumbersSchema
    portfolio_at_retirement: float
    portfolio_can_support: bool
    depleted_at_age: Optional[int] = None


class CrossoverRequest(BaseModel):
    """Request body for POST /v1/retirement/crossover"""

    current_savings: float = Field(0.0, ge=0)
    monthly_expenses: float = Field(..., ge=0)
    monthly_investment: float = Field(0.0, ge=0)
    expected_return_pct: float = 7.0
    withdrawal_rate_pct: float = 4.0


class CrossoverPointSchema(BaseModel):
    year: int
    savings: int
    passive_income: int
    expenses: float
    target_savings: int


class CrossoverResponse(BaseModel):
    crossover_year: Optional[int]
    points: List[CrossoverPointSchema]


class WealthMultiplierRequest(BaseModel):
    """Request body for POST /v1/retirement/wealth-multiplier"""

    current_age: int = Field(..., ge=0)
    retirement_age: int = Field(65, ge=0)
    annual_contribution: float = Field(..., ge=0)


class WealthMultiplierPointSchema(BaseModel):
    age: int
    accumulated: int
    contributions: float


class WealthMultiplierResponse(BaseModel):
    age: int
    multiplier: float
    future_value: float
    used_fallback: bool
    points: List[WealthMultiplierPointSchema]
