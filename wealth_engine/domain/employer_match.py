"""Employer 401(k) contribution projection"""

from typing import Sequence

from wealth_engine.domain.models import Deduction, EmployerMatchResult
from wealth_engine.domain.paycheck import pay_periods_per_year, resolve_deduction
from wealth_engine.utils.validation import require_positive, require_range

RETIREMENT_LABELS = ("401(k)", "401k", "403(b)", "403b", "457(b)", "457b", "roth 401(k)", "roth 401k")


def is_retirement_deduction(label: str) -> bool:
    lower = label.lower()
    return any(r in lower for r in RETIREMENT_LABELS)


def employer_match(
    gross_pay: float,
    pay_frequency,
    pre_tax_deductions: Sequence[Deduction] = (),
    post_tax_deductions: Sequence[Deduction] = (),
    base_contribution_pct: float = 2.0,
    match_rate_pct: float = 50.0,
    match_up_to_pct: float = 6.0,
) -> EmployerMatchResult:
    """
    Employer money added on top of the employee's retirement deferrals.

    Pre-tax and Roth deductions count as deferrals when their label names a
    retirement plan. The employer pays base_contribution_pct of gross
    unconditionally, plus match_rate_pct of the deferral percentage up to
    match_up_to_pct of gross.

    Example (defaults, 10% deferral): 2% base + 50% * 6% = 5% of gross.
    """
    require_positive("gross_pay", gross_pay)
    require_range("base_contribution_pct", base_contribution_pct, 0, 100)
    require_range("match_rate_pct", match_rate_pct, 0, 100)
    require_range("match_up_to_pct", match_up_to_pct, 0, 100)
    periods = pay_periods_per_year(pay_frequency)

    deferrals = [d for d in list(pre_tax_deductions) + list(post_tax_deductions) if is_retirement_deduction(d.label)]
    employee_per_period = sum(resolve_deduction(d, gross_pay) for d in deferrals)
    employee_pct = employee_per_period / gross_pay * 100

    base_per_period = base_contribution_pct / 100 * gross_pay
    matchable_pct = min(employee_pct, match_up_to_pct)
    match_per_period = match_rate_pct / 100 * matchable_pct / 100 * gross_pay

    annual_employee = employee_per_period * periods
    annual_base = base_per_period * periods
    annual_match = match_per_period * periods
    annual_employer = annual_base + annual_match

    return EmployerMatchResult(
        employee_contribution_per_period=employee_per_period,
        employee_contribution_pct=employee_pct,
        employer_base_per_period=base_per_period,
        employer_match_per_period=match_per_period,
        annual_employee_contribution=annual_employee,
        annual_employer_base=annual_base,
        annual_employer_match=annual_match,
        annual_employer_total=annual_employer,
        total_annual_retirement=annual_employee + annual_employer,
        free_money_pct=annual_employer / annual_employee * 100 if annual_employee > 0 else 0.0,
    )
