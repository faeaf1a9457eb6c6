"""Federal bracket tables and payroll tax rules

Tables are plain immutable data so a new tax year is a new constant, not a
code change. Calculators receive them as parameters.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from wealth_engine.domain.exceptions import InvalidInputError
from wealth_engine.domain.models import FilingStatus, TaxBracket


@dataclass(frozen=True)
class FederalTaxTable:
    """Progressive brackets per filing status for one tax year"""

    year: int
    brackets: Mapping[FilingStatus, Tuple[TaxBracket, ...]]
    withholding_allowance: float = 0.0  # annual income exempted per W-4 allowance

    def __post_init__(self) -> None:
        for status, brackets in self.brackets.items():
            _validate_brackets(status, brackets)

    def for_status(self, filing_status: FilingStatus) -> Tuple[TaxBracket, ...]:
        try:
            return self.brackets[FilingStatus(filing_status)]
        except (KeyError, ValueError):
            raise InvalidInputError(
                f"No {self.year} federal brackets for filing status {filing_status!r}"
            ) from None


def _validate_brackets(status: FilingStatus, brackets: Tuple[TaxBracket, ...]) -> None:
    """Brackets must start at 0, be contiguous, have positive width and end unbounded"""
    if not brackets:
        raise InvalidInputError(f"{status}: bracket table is empty")
    if brackets[0].lower != 0:
        raise InvalidInputError(f"{status}: first bracket must start at 0")
    if brackets[-1].upper is not None:
        raise InvalidInputError(f"{status}: top bracket must be unbounded")

    for previous, current in zip(brackets, brackets[1:]):
        if previous.upper != current.lower:
            raise InvalidInputError(f"{status}: gap between {previous.upper} and {current.lower}")

    for bracket in brackets:
        if bracket.upper is not None and bracket.upper <= bracket.lower:
            raise InvalidInputError(f"{status}: bracket starting at {bracket.lower} has zero width")
        if not 0 <= bracket.rate <= 1:
            raise InvalidInputError(f"{status}: rate {bracket.rate} must be a decimal between 0 and 1")


def _brackets(*rows: Tuple[float, float, float]) -> Tuple[TaxBracket, ...]:
    """Build a bracket tuple from (lower, upper, percent) rows; upper=None is unbounded"""
    return tuple(TaxBracket(lower=lower, upper=upper, rate=pct / 100) for lower, upper, pct in rows)


FEDERAL_TAX_TABLE_2024 = FederalTaxTable(
    year=2024,
    brackets=MappingProxyType({
        FilingStatus.SINGLE: _brackets(
            (0, 11600, 10),
            (11600, 47150, 12),
            (47150, 100525, 22),
            (100525, 191950, 24),
            (191950, 243725, 32),
            (243725, 609350, 35),
            (609350, None, 37),
        ),
        FilingStatus.MARRIED: _brackets(
            (0, 23200, 10),
            (23200, 94300, 12),
            (94300, 201050, 22),
            (201050, 383900, 24),
            (383900, 487450, 32),
            (487450, 731200, 35),
            (731200, None, 37),
        ),
        FilingStatus.MARRIED_SEPARATE: _brackets(
            (0, 11600, 10),
            (11600, 47150, 12),
            (47150, 100525, 22),
            (100525, 191950, 24),
            (191950, 243725, 32),
            (243725, 365600, 35),
            (365600, None, 37),
        ),
        FilingStatus.HEAD_OF_HOUSEHOLD: _brackets(
            (0, 16550, 10),
            (16550, 63100, 12),
            (63100, 100500, 22),
            (100500, 191950, 24),
            (191950, 243700, 32),
            (243700, 609350, 35),
            (609350, None, 37),
        ),
    }),
    withholding_allowance=4300,
)

FEDERAL_TAX_TABLES = MappingProxyType({
    2024: FEDERAL_TAX_TABLE_2024,
})


@dataclass(frozen=True)
class PayrollTaxRules:
    """FICA rates; social security stops at the annual wage base, medicare does not"""

    social_security_rate: float = 0.062
    social_security_wage_base: float = 168600
    medicare_rate: float = 0.0145

    @property
    def social_security_annual_cap(self) -> float:
        return self.social_security_wage_base * self.social_security_rate


PAYROLL_TAX_RULES_2024 = PayrollTaxRules()


def federal_table_for_year(year: int) -> FederalTaxTable:
    try:
        return FEDERAL_TAX_TABLES[year]
    except KeyError:
        raise InvalidInputError(f"No federal tax table for {year}") from None
