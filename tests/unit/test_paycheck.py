"""Unit tests for paycheck allocation and progressive federal withholding"""

import pytest
from wealth_engine.domain.exceptions import InvalidInputError, ParameterOutOfRangeError
from wealth_engine.domain.models import (
    Deduction,
    DeductionKind,
    FilingStatus,
    PayFrequency,
    StateTaxResult,
    TaxBracket,
)
from wealth_engine.domain.paycheck import (
    PAY_PERIODS_PER_YEAR,
    FlatRateStateTaxResolver,
    bracket_breakdown,
    calculate_federal_tax,
    calculate_paycheck,
    marginal_rate,
    parse_filing_status,
    pay_periods_per_year,
    project_yearly,
)
from wealth_engine.domain.tax_tables import FEDERAL_TAX_TABLE_2024, FederalTaxTable, PayrollTaxRules


def _assert_identity(result):
    """Net pay, taxes and deductions account for every dollar of gross"""
    total = result.net_pay + result.total_taxes + result.pre_tax_deductions + result.post_tax_deductions
    assert total == pytest.approx(result.gross_pay)


def test_federal_tax_is_progressive_not_flat():
    """$60,000 single is taxed bracket by bracket, not at the 22% marginal rate"""
    tax = calculate_federal_tax(60000, FilingStatus.SINGLE, FEDERAL_TAX_TABLE_2024)

    expected = 11600 * 0.10 + (47150 - 11600) * 0.12 + (60000 - 47150) * 0.22
    assert tax == pytest.approx(expected)
    assert tax == pytest.approx(8253)
    assert tax != pytest.approx(60000 * 0.22)


def test_federal_tax_zero_income():
    assert calculate_federal_tax(0, FilingStatus.SINGLE, FEDERAL_TAX_TABLE_2024) == 0
    assert calculate_federal_tax(-100, FilingStatus.SINGLE, FEDERAL_TAX_TABLE_2024) == 0


def test_married_brackets_are_wider():
    single = calculate_federal_tax(120000, FilingStatus.SINGLE, FEDERAL_TAX_TABLE_2024)
    married = calculate_federal_tax(120000, FilingStatus.MARRIED, FEDERAL_TAX_TABLE_2024)

    assert married < single


def test_biweekly_5000_single_paycheck():
    """$130,000 a year: 1,160 + 4,266 + 11,742.50 + 7,074 = 24,242.50 federal"""
    result = calculate_paycheck(5000, "biweekly", "single")

    assert result.taxable_income == 5000
    assert result.taxes.federal_tax == pytest.approx(24242.5 / 26)
    assert result.taxes.social_security == pytest.approx(310)
    assert result.taxes.medicare == pytest.approx(72.5)
    assert result.taxes.state_tax == 0
    assert result.taxes.marginal_rate == 0.24
    assert result.net_pay == pytest.approx(3685.10, abs=0.01)
    assert not result.over_deducted
    _assert_identity(result)


def test_paycheck_is_deterministic():
    first = calculate_paycheck(5000, "biweekly", FilingStatus.SINGLE)
    second = calculate_paycheck(5000, "biweekly", FilingStatus.SINGLE)

    assert first == second
    assert first.net_pay == second.net_pay


def test_paycheck_identity_with_deductions_and_state_tax():
    result = calculate_paycheck(
        4200,
        "semimonthly",
        "married",
        pre_tax_deductions=[
            Deduction("401(k)", 6, DeductionKind.PERCENTAGE),
            Deduction("Health insurance", 150),
        ],
        post_tax_deductions=[Deduction("Roth IRA", 250)],
        state_tax_resolver=FlatRateStateTaxResolver(state_rate=0.05, local_rate=0.01),
        zip_code="10001",
    )

    assert result.pre_tax_deductions == pytest.approx(252 + 150)
    assert result.taxable_income == pytest.approx(4200 - 402)
    assert result.taxes.state_tax == pytest.approx(result.taxable_income * 0.05)
    assert result.taxes.local_tax == pytest.approx(result.taxable_income * 0.01)
    assert result.post_tax_deductions == 250
    _assert_identity(result)


def test_state_tax_resolver_receives_zip_and_periods():
    calls = []

    def resolver(zip_code, taxable_income, periods):
        calls.append((zip_code, taxable_income, periods))
        return StateTaxResult(state_tax=42.0, state_name="Oregon")

    result = calculate_paycheck(3000, "monthly", "single", state_tax_resolver=resolver, zip_code="97201")

    assert calls == [("97201", 3000, 12)]
    assert result.taxes.state_tax == 42.0
    assert result.taxes.state_name == "Oregon"


def test_allowances_reduce_withholding():
    """One allowance exempts $4,300 a year, taxed here at 24%"""
    without = calculate_paycheck(5000, "biweekly", "single")
    with_one = calculate_paycheck(5000, "biweekly", "single", allowances=1)

    assert without.taxes.federal_tax - with_one.taxes.federal_tax == pytest.approx(4300 * 0.24 / 26)


def test_social_security_capped_per_period():
    """$520,000 a year: per-period social security stops at the wage base share"""
    result = calculate_paycheck(10000, "weekly", "single")

    assert result.taxes.social_security == pytest.approx(168600 * 0.062 / 52)
    assert result.taxes.medicare == pytest.approx(145)


def test_over_deducted_paycheck_clamps_net_pay():
    result = calculate_paycheck(1000, "biweekly", "single", post_tax_deductions=[Deduction("Garnishment", 2000)])

    assert result.net_pay == 0
    assert result.over_deducted
    expected_shortfall = result.total_taxes + result.pre_tax_deductions + result.post_tax_deductions - 1000
    assert result.shortfall == pytest.approx(expected_shortfall)


def test_pre_tax_above_gross_floors_taxable_income():
    result = calculate_paycheck(1000, "biweekly", "single", pre_tax_deductions=[Deduction("Loan", 1500)])

    assert result.taxable_income == 0
    assert result.taxes.federal_tax == 0
    # Payroll taxes still apply to gross
    assert result.taxes.social_security == pytest.approx(62)
    assert result.over_deducted


def test_custom_bracket_table():
    flat_table = FederalTaxTable(
        year=2030,
        brackets={FilingStatus.SINGLE: (TaxBracket(0, None, 0.10),)},
    )
    result = calculate_paycheck(2000, "biweekly", "single", bracket_table=flat_table)

    assert result.taxes.federal_tax == pytest.approx(200)


def test_custom_payroll_rules():
    rules = PayrollTaxRules(social_security_rate=0.0, social_security_wage_base=0, medicare_rate=0.02)
    result = calculate_paycheck(5000, "biweekly", "single", payroll_rules=rules)

    assert result.taxes.social_security == 0
    assert result.taxes.medicare == pytest.approx(100)


@pytest.mark.parametrize(
    "kwargs, error",
    [
        ({"gross_pay": 0}, InvalidInputError),
        ({"gross_pay": -10}, InvalidInputError),
        ({"gross_pay": 20_000_000}, ParameterOutOfRangeError),
        ({"allowances": -1}, InvalidInputError),
        ({"allowances": 21}, ParameterOutOfRangeError),
        ({"allowances": 1.5}, InvalidInputError),
        ({"filing_status": "widowed"}, InvalidInputError),
    ],
)
def test_calculate_paycheck_rejects_invalid_inputs(kwargs, error):
    args = {"gross_pay": 5000, "pay_frequency": "biweekly", "filing_status": "single"}
    args.update(kwargs)

    with pytest.raises(error):
        calculate_paycheck(**args)


def test_negative_deduction_rejected():
    with pytest.raises(InvalidInputError):
        Deduction("Refund", -50)


def test_deduction_kind_parsed_from_name():
    assert Deduction("401(k)", 6, "percentage").kind is DeductionKind.PERCENTAGE

    with pytest.raises(InvalidInputError, match="unknown kind"):
        Deduction("401(k)", 5, "pct")


@pytest.mark.parametrize(
    "frequency, periods",
    [
        ("weekly", 52),
        ("biweekly", 26),
        ("semimonthly", 24),
        ("monthly", 12),
        ("fortnightly", 26),
        (PayFrequency.MONTHLY, 12),
    ],
)
def test_pay_periods_per_year(frequency, periods):
    assert pay_periods_per_year(frequency) == periods


def test_every_pay_frequency_has_periods():
    assert set(PAY_PERIODS_PER_YEAR) == set(PayFrequency)


def test_parse_filing_status():
    assert parse_filing_status("head_of_household") == FilingStatus.HEAD_OF_HOUSEHOLD
    with pytest.raises(InvalidInputError):
        parse_filing_status("joint")


@pytest.mark.parametrize(
    "value, status",
    [
        ("marriedSeparate", FilingStatus.MARRIED_SEPARATE),
        ("married_separately", FilingStatus.MARRIED_SEPARATE),
        ("headOfHousehold", FilingStatus.HEAD_OF_HOUSEHOLD),
    ],
)
def test_parse_filing_status_accepts_alternate_spellings(value, status):
    assert parse_filing_status(value) == status


def test_marginal_rate_at_bracket_edges():
    assert marginal_rate(0, FilingStatus.SINGLE, FEDERAL_TAX_TABLE_2024) == 0.10
    assert marginal_rate(47150, FilingStatus.SINGLE, FEDERAL_TAX_TABLE_2024) == 0.12
    assert marginal_rate(47151, FilingStatus.SINGLE, FEDERAL_TAX_TABLE_2024) == 0.22
    assert marginal_rate(1_000_000, FilingStatus.SINGLE, FEDERAL_TAX_TABLE_2024) == 0.37


def test_bracket_breakdown():
    slices = bracket_breakdown(60000, FilingStatus.SINGLE)

    assert [s.rate for s in slices] == [0.10, 0.12, 0.22]
    assert [s.taxable_amount for s in slices] == [11600, 35550, 12850]
    assert [s.is_current for s in slices] == [False, False, True]
    assert sum(s.tax_amount for s in slices) == pytest.approx(8253)


def test_project_yearly_caps_social_security():
    result = calculate_paycheck(10000, "weekly", "single")
    yearly = project_yearly(result, "weekly")

    assert yearly.periods == 52
    assert yearly.gross_income == 520000
    assert yearly.social_security == pytest.approx(168600 * 0.062)
    assert yearly.medicare == pytest.approx(520000 * 0.0145)
    assert yearly.net_pay == pytest.approx(yearly.gross_income - yearly.total_taxes)


def test_project_yearly_scales_biweekly():
    result = calculate_paycheck(5000, "biweekly", "single")
    yearly = project_yearly(result, "biweekly")

    assert yearly.federal_tax == pytest.approx(24242.5)
    assert yearly.net_pay == pytest.approx(result.net_pay * 26)


def test_bracket_breakdown_of_withholding_base_matches_federal_tax():
    """Three allowances take $12,900 off $130,000 before the brackets apply"""
    result = calculate_paycheck(5000, "biweekly", "single", allowances=3)
    yearly = project_yearly(result, "biweekly")

    assert result.withholding_base == pytest.approx(130000 - 3 * 4300)
    slices = bracket_breakdown(result.withholding_base, FilingStatus.SINGLE)

    assert sum(s.tax_amount for s in slices) == pytest.approx(yearly.federal_tax)
    assert yearly.federal_tax == pytest.approx(21146.5)
    assert [s for s in slices if s.is_current][0].rate == result.taxes.marginal_rate
