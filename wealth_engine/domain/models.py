"""Domain models - immutable dataclasses for calculator inputs and outputs"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple

from wealth_engine.domain.exceptions import InvalidInputError


# Dividends


class DividendFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"

    @property
    def payments_per_year(self) -> int:
        return {"monthly": 12, "quarterly": 4, "annually": 1}[self.value]

    @property
    def months_between_payments(self) -> int:
        return 12 // self.payments_per_year


@dataclass(frozen=True)
class Holding:
    """One dividend-paying position"""

    symbol: str
    shares: float
    cost_basis: float  # total paid for the position, not per share
    annual_dividend: float  # per share
    frequency: DividendFrequency = DividendFrequency.QUARTERLY
    next_ex_date: Optional[date] = None
    payment_date: Optional[date] = None
    drip_enabled: bool = True
    dividend_growth_rate: Optional[float] = None  # 5-year CAGR, percent

    def __post_init__(self) -> None:
        if self.shares < 0:
            raise InvalidInputError(f"{self.symbol}: shares must not be negative")
        if self.cost_basis < 0:
            raise InvalidInputError(f"{self.symbol}: cost basis must not be negative")
        if self.annual_dividend < 0:
            raise InvalidInputError(f"{self.symbol}: annual dividend must not be negative")

    @property
    def annual_income(self) -> float:
        return self.annual_dividend * self.shares

    @property
    def dividend_yield(self) -> float:
        """Yield on cost in percent"""
        if self.cost_basis <= 0:
            return 0.0
        return self.annual_income / self.cost_basis * 100


@dataclass(frozen=True)
class GrowthSnapshot:
    """One year of a DRIP projection, rounded for display"""

    year: int
    value: int
    dividends: int
    drip_shares: int


@dataclass(frozen=True)
class DripComparisonPoint:
    year: int
    with_drip: int
    without_drip: int
    drip_dividends: int
    no_drip_dividends: int


@dataclass(frozen=True)
class DripAdvantage:
    """Year-N difference between reinvesting and taking dividends as cash"""

    years: int
    with_drip: int
    without_drip: int
    advantage: int
    advantage_pct: float
    with_drip_return_pct: float
    without_drip_return_pct: float


@dataclass(frozen=True)
class PortfolioTotals:
    total_cost: float
    total_shares: float
    annual_income: float
    monthly_income: float
    average_yield: float  # percent of cost


@dataclass(frozen=True)
class MonthlyIncome:
    month: int  # 1..12
    income: float
    contributors: Tuple[Tuple[str, float], ...] = ()


@dataclass(frozen=True)
class DividendEvent:
    date: date
    symbol: str
    kind: str  # "ex-date" or "payment"
    amount: float


# Options


class OptionType(str, Enum):
    CALL = "call"
    PUT = "put"


class RiskFlag(str, Enum):
    SAFE = "Safe"
    NEUTRAL = "Neutral"
    RISKY = "Risky"


@dataclass(frozen=True)
class OptionParameters:
    underlying_price: float
    strike: float
    implied_volatility: float  # decimal, 0.30 for 30%
    days_to_expiry: int
    option_type: OptionType
    premium: float = 0.0
    hourly_theta: float = 0.0


@dataclass(frozen=True)
class OptionMetrics:
    years_to_expiry: float
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
    hourly_theta: float
    daily_theta_impact: float


@dataclass(frozen=True)
class RiskThresholds:
    """Policy knobs for Safe/Neutral/Risky classification"""

    safe_prob_itm: float = 0.3
    risky_prob_itm: float = 0.7
    min_iv_to_hv_ratio: float = 1.0


@dataclass(frozen=True)
class RiskAssessment:
    symbol: str
    parameters: OptionParameters
    metrics: OptionMetrics
    flag: RiskFlag


@dataclass(frozen=True)
class RiskSummary:
    safe_count: int
    neutral_count: int
    risky_count: int
    average_prob_itm: float


@dataclass(frozen=True)
class Greeks:
    delta: float
    gamma: float
    theta: float  # per calendar day
    vega: float  # per 1% change in volatility
    rho: float  # per 1% change in rates


# Paycheck


class DeductionKind(str, Enum):
    PERCENTAGE = "percentage"
    AMOUNT = "amount"


@dataclass(frozen=True)
class Deduction:
    label: str
    value: float
    kind: DeductionKind = DeductionKind.AMOUNT

    def __post_init__(self) -> None:
        if self.value < 0:
            raise InvalidInputError(f"Deduction '{self.label}' must not be negative")
        try:
            kind = DeductionKind(self.kind)
        except ValueError:
            raise InvalidInputError(f"Deduction '{self.label}' has unknown kind: {self.kind!r}") from None
        object.__setattr__(self, "kind", kind)


class FilingStatus(str, Enum):
    SINGLE = "single"
    MARRIED = "married"
    MARRIED_SEPARATE = "married_separate"
    HEAD_OF_HOUSEHOLD = "head_of_household"


class PayFrequency(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    SEMIMONTHLY = "semimonthly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class TaxBracket:
    lower: float
    upper: Optional[float]  # None for the top bracket
    rate: float  # decimal


@dataclass(frozen=True)
class StateTaxResult:
    state_tax: float = 0.0
    local_tax: float = 0.0
    state_name: Optional[str] = None
    local_name: Optional[str] = None


@dataclass(frozen=True)
class TaxBreakdown:
    federal_tax: float
    state_tax: float
    local_tax: float
    social_security: float
    medicare: float
    federal_rate: float  # effective, fraction of gross
    state_rate: float
    local_rate: float
    marginal_rate: float
    state_name: Optional[str] = None
    local_name: Optional[str] = None


@dataclass(frozen=True)
class PaycheckResult:
    gross_pay: float
    pre_tax_deductions: float
    taxable_income: float
    taxes: TaxBreakdown
    total_taxes: float
    post_tax_deductions: float
    net_pay: float
    over_deducted: bool = False
    shortfall: float = 0.0
    withholding_base: float = 0.0  # annual taxable income less allowances


@dataclass(frozen=True)
class YearlyPaycheck:
    periods: int
    gross_income: float
    pre_tax_deductions: float
    taxable_income: float
    federal_tax: float
    state_tax: float
    local_tax: float
    social_security: float
    medicare: float
    total_taxes: float
    post_tax_deductions: float
    net_pay: float


@dataclass(frozen=True)
class BracketSlice:
    rate: float
    lower: float
    upper: Optional[float]
    taxable_amount: float
    tax_amount: float
    is_current: bool


@dataclass(frozen=True)
class EmployerMatchResult:
    employee_contribution_per_period: float
    employee_contribution_pct: float
    employer_base_per_period: float
    employer_match_per_period: float
    annual_employee_contribution: float
    annual_employer_base: float
    annual_employer_match: float
    annual_employer_total: float
    total_annual_retirement: float
    free_money_pct: float


# Retirement


class RetirementPhase(str, Enum):
    ACCUMULATION = "Accumulation"
    RETIREMENT = "Retirement"


@dataclass(frozen=True)
class RetirementProjectionPoint:
    age: int
    portfolio: int
    phase: RetirementPhase


@dataclass(frozen=True)
class FireNumbers:
    annual_spending: float
    standard: float
    lean: float
    fat: float
    barista: float


@dataclass(frozen=True)
class CoastFirePoint:
    age: int
    coast_amount: int


@dataclass(frozen=True)
class CrossoverPoint:
    year: int
    savings: int
    passive_income: int
    expenses: float
    target_savings: int


@dataclass(frozen=True)
class CrossoverResult:
    points: List[CrossoverPoint]
    crossover_year: Optional[int]  # None when not reached within the horizon

    @property
    def reached(self) -> bool:
        return self.crossover_year is not None


@dataclass(frozen=True)
class WealthMultiplierPoint:
    age: int
    accumulated: int
    contributions: float


@dataclass(frozen=True)
class WealthMultiplierResult:
    age: int
    multiplier: float
    future_value: float
    used_fallback: bool
    points: List[WealthMultiplierPoint] = field(default_factory=list)


@dataclass(frozen=True)
class RetirementReadiness:
    portfolio_at_retirement: float
    annual_withdrawal: float
    monthly_income: float
    years_to_retirement: int
    portfolio_can_support: bool
