"""System prompt asking an external generator for an assumption document."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dcf_workbench.reports.renderer import ReportRenderer

_TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

DEFAULT_COMPANY = "Unknown Company"
DEFAULT_TICKER = "N/A"
DEFAULT_REGION = "N/A"
DEFAULT_CURRENCY = "USD"
DEFAULT_FORECAST_YEARS = 10
DEFAULT_GUARDRAIL = "<= risk-free rate"


def _text_or(value: Optional[str], fallback: str) -> str:
    cleaned = (value or "").strip()
    return cleaned or fallback


@dataclass
class PromptRequest:
    """Operator-chosen metadata embedded into the prompt."""

    company_name: Optional[str] = None
    ticker: Optional[str] = None
    region: Optional[str] = None
    currency: Optional[str] = None
    forecast_years: Optional[int] = None
    guardrail: Optional[str] = None

    def resolved(self) -> "PromptRequest":
        """Copy with blanks replaced by the documented fallbacks."""
        years = self.forecast_years if self.forecast_years and self.forecast_years > 0 else DEFAULT_FORECAST_YEARS
        return PromptRequest(
            company_name=_text_or(self.company_name, DEFAULT_COMPANY),
            ticker=_text_or(self.ticker, DEFAULT_TICKER),
            region=_text_or(self.region, DEFAULT_REGION),
            currency=_text_or(self.currency, DEFAULT_CURRENCY),
            forecast_years=int(years),
            guardrail=_text_or(self.guardrail, DEFAULT_GUARDRAIL),
        )


def build_system_prompt(request: Optional[PromptRequest] = None) -> str:
    """Render the generator instructions, including the required JSON schema."""
    resolved = (request or PromptRequest()).resolved()
    renderer = ReportRenderer(template_dir=_TEMPLATE_DIR, template_name="system_prompt.txt.j2")
    return renderer.render(
        {
            "company_name": resolved.company_name,
            "ticker": resolved.ticker,
            "region": resolved.region,
            "currency": resolved.currency,
            "forecast_years": resolved.forecast_years,
            "guardrail": resolved.guardrail,
        }
    )
