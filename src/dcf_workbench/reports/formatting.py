"""Number formatting and report-context assembly for the presentation layer."""
from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Tuple

from dcf_workbench.domain.models.valuation import ValuationResult

NOT_AVAILABLE = "n/a"


def pct(value: float) -> str:
    """0.0825 -> '8.25%'."""
    if not _finite(value):
        return NOT_AVAILABLE
    return f"{value * 100:.2f}%"


def num(value: float, currency: str = "") -> str:
    """Thousands-separated, at most two decimals, optional currency prefix."""
    if not _finite(value):
        return NOT_AVAILABLE
    formatted = f"{float(value):,.2f}".rstrip("0").rstrip(".")
    if formatted == "-0":
        formatted = "0"
    return f"{currency} {formatted}" if currency else formatted


def factor(value: float) -> str:
    if not _finite(value):
        return NOT_AVAILABLE
    return f"{value:.4f}"


def metric_rows(result: ValuationResult, currency: str = "") -> List[Tuple[str, str]]:
    """Headline metrics in display order."""
    return [
        ("Cost of Equity", pct(result.cost_of_equity)),
        ("After-tax Cost of Debt", pct(result.after_tax_cost_of_debt)),
        ("WACC", pct(result.wacc)),
        ("Terminal Growth Used", pct(result.terminal_growth)),
        ("PV of Explicit FCFF", num(result.pv_fcff_total, currency)),
        ("PV of Terminal Value", num(result.pv_terminal_value, currency)),
        ("Enterprise Value", num(result.enterprise_value, currency)),
        ("Equity Value", num(result.equity_value, currency)),
        ("Value per Share", num(result.value_per_share, currency)),
    ]


def forecast_table(result: ValuationResult, currency: str = "") -> List[Dict[str, str]]:
    rows: List[Dict[str, str]] = []
    for row in result.forecast_rows:
        rows.append(
            {
                "year": f"Year {row.year}",
                "revenue": num(row.revenue, currency),
                "margin": pct(row.margin),
                "ebit": num(row.ebit, currency),
                "tax_rate": pct(row.tax_rate),
                "nopat": num(row.nopat, currency),
                "reinvestment": num(row.reinvestment, currency),
                "fcff": num(row.fcff, currency),
                "discount_factor": factor(row.discount_factor),
                "pv_fcff": num(row.pv_fcff, currency),
            }
        )
    return rows


FORECAST_COLUMNS: List[Tuple[str, str]] = [
    ("year", "Year"),
    ("revenue", "Revenue"),
    ("margin", "Margin"),
    ("ebit", "EBIT"),
    ("tax_rate", "Tax Rate"),
    ("nopat", "NOPAT"),
    ("reinvestment", "Reinvestment"),
    ("fcff", "FCFF"),
    ("discount_factor", "Discount Factor"),
    ("pv_fcff", "PV FCFF"),
]


def build_report_context(
    result: ValuationResult,
    currency: str = "",
    *,
    company_name: Optional[str] = None,
    ticker: Optional[str] = None,
    valuation_date: Optional[str] = None,
    notes: Optional[str] = None,
) -> Dict[str, Any]:
    """Everything the Markdown/HTML templates need."""
    return {
        "company_name": company_name or "Unknown Company",
        "ticker": ticker or "N/A",
        "currency": currency,
        "valuation_date": valuation_date or "",
        "notes": notes or "",
        "metrics": metric_rows(result, currency),
        "columns": FORECAST_COLUMNS,
        "rows": forecast_table(result, currency),
    }


def _finite(value: Any) -> bool:
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False
