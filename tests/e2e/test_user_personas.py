"""
E2E tests for user personas walking through several calculators via the API.

User personas:
- early_career: first job, biweekly pay with a 401(k), long runway to retirement
- dividend_investor: income portfolio comparing reinvestment against cash
- premium_seller: writes covered calls and cash-secured puts
- late_starter: little saved at 55, checks whether retirement is feasible
- high_earner: weekly pay well above the social security wage base
"""

import pytest
from fastapi.testclient import TestClient


@pytest.mark.integration
def test_early_career_saver(client: TestClient):
    """
    early_career: $2,000 biweekly, 10% to a 401(k)
    Expected: employer match counted, retirement target reachable by 65
    """
    paycheck = client.post(
        "/v1/paycheck",
        json={
            "gross_pay": 2000,
            "pay_frequency": "biweekly",
            "filing_status": "single",
            "pre_tax_deductions": [{"label": "401(k)", "value": 10, "kind": "percentage"}],
        },
    )
    assert paycheck.status_code == 200
    pay = paycheck.json()
    assert pay["taxes"]["marginal_rate"] == 0.12, "$46,800 after deferrals sits in the 12% bracket"
    assert pay["employer_match"]["annual_employee_contribution"] == pytest.approx(200 * 26)

    yearly_saving = pay["employer_match"]["total_annual_retirement"]
    retirement = client.post(
        "/v1/retirement/projection",
        json={
            "current_age": 23,
            "retirement_age": 65,
            "monthly_contribution": yearly_saving / 12,
            "annual_spending_at_retirement": 40000,
        },
    )
    assert retirement.status_code == 200
    assert retirement.json()["portfolio_can_support"] is True


@pytest.mark.integration
def test_dividend_investor(client: TestClient):
    """
    dividend_investor: three holdings with mixed payment schedules
    Expected: DRIP ahead of cash by year 20, income spread across the year
    """
    response = client.post(
        "/v1/drip/projection",
        json={
            "holdings": [
                {"symbol": "SCHD", "shares": 300, "cost_basis": 22500, "annual_dividend": 2.64, "frequency": "quarterly"},
                {"symbol": "O", "shares": 200, "cost_basis": 11000, "annual_dividend": 3.08, "frequency": "monthly"},
                {"symbol": "JNJ", "shares": 40, "cost_basis": 6400, "annual_dividend": 4.96, "frequency": "quarterly"},
            ],
            "years": 20,
            "growth_rate_pct": 6,
        },
    )

    assert response.status_code == 200
    data = response.json()
    final = data["comparison"][-1]
    assert final["with_drip"] > final["without_drip"], "Reinvesting should win over 20 years"
    assert data["drip_advantage_pct"] > 0
    assert all(month["income"] > 0 for month in data["monthly_breakdown"]), "Monthly payer covers every month"
    assert list(data["income_by_symbol"]) == ["SCHD", "O", "JNJ"]


@pytest.mark.integration
def test_premium_seller(client: TestClient):
    """
    premium_seller: covered call far above the price, put just below it
    Expected: call Safe, put Neutral or Risky
    """
    call = client.post(
        "/v1/options/evaluate",
        json={
            "symbol": "msft",
            "underlying_price": 400,
            "strike": 450,
            "implied_volatility": 0.25,
            "days_to_expiry": 21,
            "option_type": "call",
            "premium": 1.10,
            "historical_volatility": 0.22,
        },
    )
    put = client.post(
        "/v1/options/evaluate",
        json={
            "symbol": "msft",
            "underlying_price": 400,
            "strike": 398,
            "implied_volatility": 0.25,
            "days_to_expiry": 21,
            "option_type": "put",
            "premium": 6.40,
        },
    )

    assert call.status_code == 200
    assert put.status_code == 200
    assert call.json()["risk_flag"] == "Safe"
    assert put.json()["risk_flag"] in ("Neutral", "Risky")
    assert put.json()["prob_itm"] > call.json()["prob_itm"]


@pytest.mark.integration
def test_late_starter(client: TestClient):
    """
    late_starter: $80k saved at 55, wants $50k a year from 65
    Expected: not enough for standard FIRE, crossover not reached
    """
    retirement = client.post(
        "/v1/retirement/projection",
        json={
            "current_age": 55,
            "retirement_age": 65,
            "current_savings": 80000,
            "monthly_contribution": 1000,
            "annual_spending_at_retirement": 50000,
        },
    )
    assert retirement.status_code == 200
    data = retirement.json()
    assert data["portfolio_can_support"] is False
    assert data["depleted_at_age"] is not None

    crossover = client.post(
        "/v1/retirement/crossover",
        json={"current_savings": 20000, "monthly_expenses": 50000 / 12, "monthly_investment": 50},
    )
    assert crossover.status_code == 200
    assert crossover.json()["crossover_year"] is None

    multiplier = client.post(
        "/v1/retirement/wealth-multiplier",
        json={"current_age": 55, "annual_contribution": 12000},
    )
    assert multiplier.json()["multiplier"] == 11


@pytest.mark.integration
def test_high_earner_social_security_cap(client: TestClient):
    """
    high_earner: $12,000 a week, married
    Expected: social security capped for the year, medicare uncapped
    """
    response = client.post(
        "/v1/paycheck",
        json={"gross_pay": 12000, "pay_frequency": "weekly", "filing_status": "married"},
    )

    assert response.status_code == 200
    yearly = response.json()["yearly"]
    assert yearly["social_security"] == pytest.approx(168600 * 0.062)
    assert yearly["medicare"] == pytest.approx(12000 * 52 * 0.0145)
