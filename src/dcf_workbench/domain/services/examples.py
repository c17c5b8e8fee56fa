"""Demo assumption document used by the CLI ``example`` command and tests."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

EXAMPLE_VALUATION_DATE = "2026-02-16"


def _growth_path(years: int) -> List[float]:
    # Fades from 11% toward a 3% floor.
    return [max(0.03, 0.11 - i * 0.007) for i in range(years)]


def _margin_path(years: int) -> List[float]:
    return [min(0.31, 0.28 + i * 0.003) for i in range(years)]


def _tax_path(years: int) -> List[float]:
    return [min(0.24, 0.18 + i * 0.006) for i in range(years)]


def build_example_payload(
    forecast_years: int = 10,
    *,
    company_name: Optional[str] = None,
    ticker: Optional[str] = None,
    currency: Optional[str] = None,
) -> Dict[str, Any]:
    """Return a JSON-shaped assumption set for a large-cap hardware company."""
    years = int(forecast_years) if forecast_years and forecast_years > 0 else 10
    return {
        "meta": {
            "company_name": company_name or "Apple Inc.",
            "ticker": ticker or "AAPL",
            "currency": currency or "USD",
            "valuation_date": EXAMPLE_VALUATION_DATE,
            "notes": "Example assumptions for demo purposes only.",
        },
        "starting_point": {
            "revenue": 400000,
            "operating_margin": 0.29,
            "tax_rate": 0.19,
            "debt": 110000,
            "cash": 65000,
            "shares_outstanding": 15500,
            "minority_interest": 0,
            "cross_holdings": 0,
        },
        "assumptions": {
            "forecast_years": years,
            "revenue_growth": _growth_path(years),
            "operating_margin_path": _margin_path(years),
            "tax_rate_path": _tax_path(years),
            "sales_to_capital_ratio": 2,
            "risk_free_rate": 0.04,
            "equity_risk_premium": 0.05,
            "beta": 1.1,
            "pre_tax_cost_of_debt": 0.05,
            "target_debt_ratio": 0.15,
            "terminal_growth_rate": 0.03,
        },
    }
