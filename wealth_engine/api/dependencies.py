"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from wealth_engine.config import settings
from wealth_engine.domain.models import RiskThresholds
from wealth_engine.domain.paycheck import FlatRateStateTaxResolver, StateTaxResolver
from wealth_engine.domain.tax_tables import FederalTaxTable, PayrollTaxRules, federal_table_for_year


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_federal_table() -> FederalTaxTable:
    """Provide the bracket table for the configured tax year"""
    return federal_table_for_year(settings.tax_year)


def get_payroll_rules() -> PayrollTaxRules:
    return PayrollTaxRules(
        social_security_rate=settings.social_security_rate,
        social_security_wage_base=settings.social_security_wage_base,
        medicare_rate=settings.medicare_rate,
    )


def get_state_tax_resolver() -> StateTaxResolver:
    """Provide the state/local tax strategy; override to plug in a ZIP-aware resolver"""
    return FlatRateStateTaxResolver(
        state_rate=settings.default_state_tax_rate,
        local_rate=settings.default_local_tax_rate,
    )


def get_risk_thresholds() -> RiskThresholds:
    return RiskThresholds(
        safe_prob_itm=settings.safe_prob_itm,
        risky_prob_itm=settings.risky_prob_itm,
        min_iv_to_hv_ratio=settings.min_iv_to_hv_ratio,
    )


def get_wealth_multiplier_default() -> float:
    return settings.wealth_multiplier_default
