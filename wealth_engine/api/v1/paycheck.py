"""POST /v1/paycheck - gross to net paycheck breakdown"""

from fastapi import APIRouter, Depends

from wealth_engine.api.dependencies import (
    get_federal_table,
    get_payroll_rules,
    get_request_id,
    get_state_tax_resolver,
)
from wealth_engine.api.tracking import tracked_calculation
from wealth_engine.api.v1.schemas import (
    BracketSliceSchema,
    EmployerMatchSchema,
    PaycheckRequest,
    PaycheckResponse,
    TaxBreakdownSchema,
    YearlyPaycheckSchema,
)
from wealth_engine.domain.employer_match import employer_match
from wealth_engine.domain.models import Deduction
from wealth_engine.domain.paycheck import (
    StateTaxResolver,
    bracket_breakdown,
    calculate_paycheck,
    parse_filing_status,
    project_yearly,
)
from wealth_engine.domain.tax_tables import FederalTaxTable, PayrollTaxRules
from wealth_engine.infrastructure.observability.metrics import over_deducted_counter

router = APIRouter()


def _to_deductions(items) -> list[Deduction]:
    return [Deduction(label=d.label, value=d.value, kind=d.kind) for d in items]


@router.post("/paycheck", response_model=PaycheckResponse)
def create_paycheck(
    request_body: PaycheckRequest,
    request_id: str = Depends(get_request_id),
    federal_table: FederalTaxTable = Depends(get_federal_table),
    payroll_rules: PayrollTaxRules = Depends(get_payroll_rules),
    state_tax_resolver: StateTaxResolver = Depends(get_state_tax_resolver),
):
    """
    Break a paycheck into deductions, taxes and net pay.

    Flow:
    1. Calculate the per-period paycheck
    2. Annualise it (social security capped at the wage base)
    3. Slice the annual withholding base (taxable income less allowances)
       across the federal brackets
    4. Project employer retirement contributions from 401(k)-style deductions
    """
    with tracked_calculation(request_id, "paycheck") as log_fields:
        filing_status = parse_filing_status(request_body.filing_status)
        pre_tax = _to_deductions(request_body.pre_tax_deductions)
        post_tax = _to_deductions(request_body.post_tax_deductions)
        result = calculate_paycheck(
            gross_pay=request_body.gross_pay,
            pay_frequency=request_body.pay_frequency,
            filing_status=filing_status,
            allowances=request_body.allowances,
            pre_tax_deductions=pre_tax,
            post_tax_deductions=post_tax,
            bracket_table=federal_table,
            state_tax_resolver=state_tax_resolver,
            zip_code=request_body.zip_code,
            payroll_rules=payroll_rules,
        )
        yearly = project_yearly(result, request_body.pay_frequency, payroll_rules)
        brackets = bracket_breakdown(result.withholding_base, filing_status, federal_table)
        match = employer_match(request_body.gross_pay, request_body.pay_frequency, pre_tax, post_tax)

        if result.over_deducted:
            over_deducted_counter.inc()
        log_fields.update(
            pay_frequency=request_body.pay_frequency,
            filing_status=filing_status.value,
            over_deducted=result.over_deducted,
        )

        taxes = result.taxes
        return PaycheckResponse(
            gross_pay=result.gross_pay,
            pre_tax_deductions=result.pre_tax_deductions,
            taxable_income=result.taxable_income,
            taxes=TaxBreakdownSchema(
                federal_tax=taxes.federal_tax,
                state_tax=taxes.state_tax,
                local_tax=taxes.local_tax,
                social_security=taxes.social_security,
                medicare=taxes.medicare,
                federal_rate=taxes.federal_rate,
                state_rate=taxes.state_rate,
                local_rate=taxes.local_rate,
                marginal_rate=taxes.marginal_rate,
            ),
            total_taxes=result.total_taxes,
            post_tax_deductions=result.post_tax_deductions,
            net_pay=result.net_pay,
            over_deducted=result.over_deducted,
            shortfall=result.shortfall,
            yearly=YearlyPaycheckSchema(
                periods=yearly.periods,
                gross_income=yearly.gross_income,
                taxable_income=yearly.taxable_income,
                federal_tax=yearly.federal_tax,
                social_security=yearly.social_security,
                medicare=yearly.medicare,
                total_taxes=yearly.total_taxes,
                net_pay=yearly.net_pay,
            ),
            brackets=[BracketSliceSchema(**vars(b)) for b in brackets],
            employer_match=EmployerMatchSchema(
                annual_employee_contribution=match.annual_employee_contribution,
                annual_employer_base=match.annual_employer_base,
                annual_employer_match=match.annual_employer_match,
                annual_employer_total=match.annual_employer_total,
                total_annual_retirement=match.total_annual_retirement,
            ),
        )
