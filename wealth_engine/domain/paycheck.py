"""Paycheck allocator - gross to net with progressive federal withholding"""

from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from wealth_engine.domain.exceptions import InvalidInputError
from wealth_engine.domain.models import (
    BracketSlice,
    Deduction,
    DeductionKind,
    FilingStatus,
    PayFrequency,
    PaycheckResult,
    StateTaxResult,
    TaxBracket,
    TaxBreakdown,
    YearlyPaycheck,
)
from wealth_engine.domain.tax_tables import (
    FEDERAL_TAX_TABLE_2024,
    PAYROLL_TAX_RULES_2024,
    FederalTaxTable,
    PayrollTaxRules,
)
from wealth_engine.utils.validation import require_int, require_non_negative, require_positive, require_range

MAX_GROSS_PAY = 10_000_000
MAX_ALLOWANCES = 20
DEFAULT_PAY_PERIODS = 26

PAY_PERIODS_PER_YEAR = {
    PayFrequency.WEEKLY: 52,
    PayFrequency.BIWEEKLY: 26,
    PayFrequency.SEMIMONTHLY: 24,
    PayFrequency.MONTHLY: 12,
}

# Other spellings callers send for the same statuses
FILING_STATUS_ALIASES = {
    "marriedSeparate": FilingStatus.MARRIED_SEPARATE,
    "married_separately": FilingStatus.MARRIED_SEPARATE,
    "headOfHousehold": FilingStatus.HEAD_OF_HOUSEHOLD,
}


class StateTaxResolver(Protocol):
    """Resolves per-period state and local tax for a ZIP code"""

    def __call__(self, zip_code: Optional[str], taxable_income: float, periods: int) -> StateTaxResult:
        ...


@dataclass(frozen=True)
class FlatRateStateTaxResolver:
    """Flat state and local rates applied to per-period taxable income, regardless of ZIP"""

    state_rate: float
    local_rate: float = 0.0
    state_name: Optional[str] = None
    local_name: Optional[str] = None

    def __call__(self, zip_code: Optional[str], taxable_income: float, periods: int) -> StateTaxResult:
        return StateTaxResult(
            state_tax=taxable_income * self.state_rate,
            local_tax=taxable_income * self.local_rate,
            state_name=self.state_name,
            local_name=self.local_name,
        )


NO_STATE_TAX = FlatRateStateTaxResolver(state_rate=0.0)


def parse_pay_frequency(value) -> Optional[PayFrequency]:
    """PayFrequency for a name, or None when the name is not recognised"""
    try:
        return PayFrequency(value)
    except ValueError:
        return None


def pay_periods_per_year(frequency) -> int:
    """Pay periods for a frequency; unknown frequencies fall back to biweekly (26)"""
    return PAY_PERIODS_PER_YEAR.get(parse_pay_frequency(frequency), DEFAULT_PAY_PERIODS)


def parse_filing_status(value) -> FilingStatus:
    if value in FILING_STATUS_ALIASES:
        return FILING_STATUS_ALIASES[value]
    try:
        return FilingStatus(value)
    except ValueError:
        raise InvalidInputError(f"Unknown filing status: {value!r}") from None


def resolve_deduction(deduction: Deduction, gross_pay: float) -> float:
    """Dollar amount of one deduction for this paycheck"""
    if deduction.kind == DeductionKind.PERCENTAGE:
        return gross_pay * deduction.value / 100
    return deduction.value


def total_deductions(deductions: Sequence[Deduction], gross_pay: float) -> float:
    return sum(resolve_deduction(d, gross_pay) for d in deductions)


def _taxable_in_bracket(income: float, bracket: TaxBracket) -> float:
    top = income if bracket.upper is None else min(income, bracket.upper)
    return max(0.0, top - bracket.lower)


def calculate_federal_tax(annual_income: float, filing_status: FilingStatus, table: FederalTaxTable) -> float:
    """
    Progressive federal tax: each bracket taxes only the income inside it.

    Example (2024 single, $60,000):
        11,600 * 10% + 35,550 * 12% + 12,850 * 22% = 8,253
    """
    if annual_income <= 0:
        return 0.0
    brackets = table.for_status(filing_status)
    return sum(_taxable_in_bracket(annual_income, b) * b.rate for b in brackets)


def marginal_rate(annual_income: float, filing_status: FilingStatus, table: FederalTaxTable) -> float:
    """Rate of the bracket the last dollar falls in"""
    brackets = table.for_status(filing_status)
    for bracket in brackets:
        if bracket.upper is None or annual_income <= bracket.upper:
            return bracket.rate
    return brackets[-1].rate


def bracket_breakdown(
    annual_taxable_income: float,
    filing_status: FilingStatus,
    table: FederalTaxTable = FEDERAL_TAX_TABLE_2024,
) -> List[BracketSlice]:
    """Per-bracket slice of income and tax; brackets with nothing in them are dropped"""
    slices = []
    for bracket in table.for_status(filing_status):
        taxable = _taxable_in_bracket(annual_taxable_income, bracket)
        is_current = annual_taxable_income > bracket.lower and (
            bracket.upper is None or annual_taxable_income <= bracket.upper
        )
        if taxable > 0 or is_current:
            slices.append(
                BracketSlice(
                    rate=bracket.rate,
                    lower=bracket.lower,
                    upper=bracket.upper,
                    taxable_amount=taxable,
                    tax_amount=taxable * bracket.rate,
                    is_current=is_current,
                )
            )
    return slices


def _rate_of(amount: float, gross_pay: float) -> float:
    return amount / gross_pay if gross_pay > 0 else 0.0


def calculate_paycheck(
    gross_pay: float,
    pay_frequency,
    filing_status,
    allowances: int = 0,
    pre_tax_deductions: Sequence[Deduction] = (),
    post_tax_deductions: Sequence[Deduction] = (),
    bracket_table: FederalTaxTable = FEDERAL_TAX_TABLE_2024,
    state_tax_resolver: Optional[StateTaxResolver] = None,
    zip_code: Optional[str] = None,
    payroll_rules: PayrollTaxRules = PAYROLL_TAX_RULES_2024,
) -> PaycheckResult:
    """
    Break one paycheck into deductions, taxes and net pay.

    Order:
    1. pre-tax deductions (percentages apply to gross)
    2. taxable income = gross - pre-tax, floored at 0
    3. federal tax on annualised taxable income less allowances, via brackets
    4. federal tax brought back to one period
    5. state/local via the injected resolver; social security up to the wage
       base; medicare uncapped
    6. total taxes
    7. post-tax deductions
    8. net pay = gross - pre-tax - taxes - post-tax

    When deductions and taxes exceed gross, net pay is clamped to 0 and the
    result is flagged over_deducted with the uncovered amount in shortfall.
    """
    require_positive("gross_pay", gross_pay)
    require_range("gross_pay", gross_pay, 0, MAX_GROSS_PAY)
    require_int("allowances", allowances)
    require_non_negative("allowances", allowances)
    require_range("allowances", allowances, 0, MAX_ALLOWANCES)
    status = parse_filing_status(filing_status)
    periods = pay_periods_per_year(pay_frequency)
    resolver = state_tax_resolver or NO_STATE_TAX

    pre_tax_total = total_deductions(pre_tax_deductions, gross_pay)
    taxable_income = max(0.0, gross_pay - pre_tax_total)

    annual_taxable = taxable_income * periods
    annual_withholding_base = max(0.0, annual_taxable - allowances * bracket_table.withholding_allowance)
    federal_tax = calculate_federal_tax(annual_withholding_base, status, bracket_table) / periods

    state = resolver(zip_code, taxable_income, periods)
    social_security = min(
        gross_pay * payroll_rules.social_security_rate,
        payroll_rules.social_security_annual_cap / periods,
    )
    medicare = gross_pay * payroll_rules.medicare_rate

    total_taxes = federal_tax + state.state_tax + state.local_tax + social_security + medicare
    post_tax_total = total_deductions(post_tax_deductions, gross_pay)

    net_pay = gross_pay - pre_tax_total - total_taxes - post_tax_total
    shortfall = 0.0
    if net_pay < 0:
        shortfall = -net_pay
        net_pay = 0.0

    taxes = TaxBreakdown(
        federal_tax=federal_tax,
        state_tax=state.state_tax,
        local_tax=state.local_tax,
        social_security=social_security,
        medicare=medicare,
        federal_rate=_rate_of(federal_tax, gross_pay),
        state_rate=_rate_of(state.state_tax, gross_pay),
        local_rate=_rate_of(state.local_tax, gross_pay),
        marginal_rate=marginal_rate(annual_withholding_base, status, bracket_table),
        state_name=state.state_name,
        local_name=state.local_name,
    )

    return PaycheckResult(
        gross_pay=gross_pay,
        pre_tax_deductions=pre_tax_total,
        taxable_income=taxable_income,
        taxes=taxes,
        total_taxes=total_taxes,
        post_tax_deductions=post_tax_total,
        net_pay=net_pay,
        over_deducted=shortfall > 0,
        shortfall=shortfall,
        withholding_base=annual_withholding_base,
    )


def project_yearly(
    result: PaycheckResult,
    pay_frequency,
    payroll_rules: PayrollTaxRules = PAYROLL_TAX_RULES_2024,
) -> YearlyPaycheck:
    """Annualise a paycheck; social security is capped at the wage base, everything else scales"""
    periods = pay_periods_per_year(pay_frequency)
    taxes = result.taxes

    social_security = min(taxes.social_security * periods, payroll_rules.social_security_annual_cap)
    federal = taxes.federal_tax * periods
    state = taxes.state_tax * periods
    local = taxes.local_tax * periods
    medicare = taxes.medicare * periods
    total_taxes = federal + state + local + social_security + medicare

    gross = result.gross_pay * periods
    pre_tax = result.pre_tax_deductions * periods
    post_tax = result.post_tax_deductions * periods

    return YearlyPaycheck(
        periods=periods,
        gross_income=gross,
        pre_tax_deductions=pre_tax,
        taxable_income=result.taxable_income * periods,
        federal_tax=federal,
        state_tax=state,
        local_tax=local,
        social_security=social_security,
        medicare=medicare,
        total_taxes=total_taxes,
        post_tax_deductions=post_tax,
        net_pay=max(0.0, gross - pre_tax - total_taxes - post_tax),
    )
