"""Domain models describing the assumption documents and valuation outputs."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from dcf_workbench.domain.errors import ValidationError

PATH_FIELDS: Tuple[str, ...] = ("revenue_growth", "operating_margin_path", "tax_rate_path")


@dataclass(frozen=True)
class Meta:
    """Descriptive metadata echoed back by generators; never used in the maths."""

    company_name: Optional[str] = None
    ticker: Optional[str] = None
    currency: Optional[str] = None
    valuation_date: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class StartingPoint:
    """Base-year figures in a single reporting currency."""

    revenue: float
    operating_margin: float
    tax_rate: float
    debt: float
    cash: float
    shares_outstanding: float
    minority_interest: float
    cross_holdings: float


@dataclass(frozen=True)
class Assumptions:
    """Forecast drivers; the three paths hold one decimal per forecast year."""

    forecast_years: int
    revenue_growth: Tuple[float, ...]
    operating_margin_path: Tuple[float, ...]
    tax_rate_path: Tuple[float, ...]
    sales_to_capital_ratio: float
    risk_free_rate: float
    equity_risk_premium: float
    beta: float
    pre_tax_cost_of_debt: float
    target_debt_ratio: float
    terminal_growth_rate: float


@dataclass(frozen=True)
class AssumptionSet:
    """Complete input document for a single valuation."""

    starting_point: StartingPoint
    assumptions: Assumptions
    meta: Meta = field(default_factory=Meta)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AssumptionSet":
        """Parse a JSON-shaped mapping, checking presence and type of every field."""
        if not isinstance(payload, Mapping):
            raise ValidationError("Assumption document must be a JSON object.", field="$")
        start = _section(payload, "starting_point")
        raw = _section(payload, "assumptions")

        years = _forecast_years(raw.get("forecast_years"))
        paths = {name: _path(raw, name, years) for name in PATH_FIELDS}

        starting_point = StartingPoint(
            **{name: _number(start, name, "starting_point") for name in _STARTING_POINT_FIELDS}
        )
        assumptions = Assumptions(
            forecast_years=years,
            **paths,
            **{name: _number(raw, name, "assumptions") for name in _SCALAR_ASSUMPTION_FIELDS},
        )
        return cls(starting_point=starting_point, assumptions=assumptions, meta=_meta(payload.get("meta")))


@dataclass(frozen=True)
class ForecastRow:
    """One explicit forecast year."""

    year: int
    revenue: float
    margin: float
    ebit: float
    tax_rate: float
    nopat: float
    reinvestment: float
    fcff: float
    discount_factor: float
    pv_fcff: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "year": self.year,
            "revenue": self.revenue,
            "margin": self.margin,
            "ebit": self.ebit,
            "taxRate": self.tax_rate,
            "nopat": self.nopat,
            "reinvestment": self.reinvestment,
            "fcff": self.fcff,
            "discountFactor": self.discount_factor,
            "pvFcff": self.pv_fcff,
        }


@dataclass(frozen=True)
class CostOfCapital:
    cost_of_equity: float
    after_tax_cost_of_debt: float
    wacc: float


@dataclass(frozen=True)
class CashFlowProjection:
    """Explicit-horizon schedule plus the two aggregates the terminal step needs."""

    rows: Tuple[ForecastRow, ...]
    pv_fcff_total: float
    last_fcff: float


@dataclass(frozen=True)
class TerminalValue:
    terminal_growth: float
    terminal_value: float
    pv_terminal_value: float


@dataclass(frozen=True)
class ValuationResult:
    """Fully derived valuation output."""

    cost_of_equity: float
    after_tax_cost_of_debt: float
    wacc: float
    terminal_growth: float
    terminal_value: float
    pv_terminal_value: float
    enterprise_value: float
    equity_value: float
    value_per_share: float
    forecast_rows: Tuple[ForecastRow, ...] = ()

    @property
    def pv_fcff_total(self) -> float:
        return float(sum(row.pv_fcff for row in self.forecast_rows))

    def non_finite_fields(self) -> List[str]:
        """Names of headline values that came out as inf/nan (e.g. zero share count)."""
        return [name for name in _HEADLINE_FIELDS if not math.isfinite(getattr(self, name))]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "costOfEquity": self.cost_of_equity,
            "afterTaxCostOfDebt": self.after_tax_cost_of_debt,
            "wacc": self.wacc,
            "terminalGrowth": self.terminal_growth,
            "terminalValue": self.terminal_value,
            "pvTerminalValue": self.pv_terminal_value,
            "enterpriseValue": self.enterprise_value,
            "equityValue": self.equity_value,
            "valuePerShare": self.value_per_share,
            "forecastRows": [row.to_dict() for row in self.forecast_rows],
        }

    def forecast_frame(self) -> pd.DataFrame:
        """Forecast rows as a DataFrame indexed by year."""
        columns = ["year", "revenue", "margin", "ebit", "taxRate", "nopat", "reinvestment", "fcff", "discountFactor", "pvFcff"]
        frame = pd.DataFrame([row.to_dict() for row in self.forecast_rows], columns=columns)
        return frame.set_index("year")


_STARTING_POINT_FIELDS = (
    "revenue",
    "operating_margin",
    "tax_rate",
    "debt",
    "cash",
    "shares_outstanding",
    "minority_interest",
    "cross_holdings",
)

_SCALAR_ASSUMPTION_FIELDS = (
    "sales_to_capital_ratio",
    "risk_free_rate",
    "equity_risk_premium",
    "beta",
    "pre_tax_cost_of_debt",
    "target_debt_ratio",
    "terminal_growth_rate",
)

_HEADLINE_FIELDS = (
    "cost_of_equity",
    "after_tax_cost_of_debt",
    "wacc",
    "terminal_growth",
    "terminal_value",
    "pv_terminal_value",
    "enterprise_value",
    "equity_value",
    "value_per_share",
)


# ----------------------------
# Parsing helpers
# ----------------------------

def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _section(payload: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    section = payload.get(key)
    if not isinstance(section, Mapping):
        raise ValidationError(f"{key} must be an object.", field=key)
    return section


def _number(section: Mapping[str, Any], key: str, prefix: str) -> float:
    dotted = f"{prefix}.{key}"
    if key not in section or section[key] is None:
        raise ValidationError(f"{dotted} is required.", field=dotted)
    value = section[key]
    if not _is_number(value):
        raise ValidationError(f"{dotted} must be a number.", field=dotted)
    return float(value)


def _forecast_years(value: Any) -> int:
    dotted = "assumptions.forecast_years"
    if not _is_number(value) or not math.isfinite(value) or int(value) != value or value <= 0:
        raise ValidationError(f"{dotted} must be a positive integer.", field=dotted)
    return int(value)


def _path(section: Mapping[str, Any], key: str, years: int) -> Tuple[float, ...]:
    values = section.get(key)
    if not isinstance(values, (list, tuple)):
        raise ValidationError(
            f"{key} must be an array with exactly {years} entries.", field=key, expected_length=years
        )
    parsed: List[float] = []
    for idx, value in enumerate(values):
        if not _is_number(value):
            dotted = f"assumptions.{key}[{idx}]"
            raise ValidationError(f"{dotted} must be a number.", field=dotted)
        parsed.append(float(value))
    return tuple(parsed)


def _meta(raw: Any) -> Meta:
    if not isinstance(raw, Mapping):
        return Meta()

    def text(key: str) -> Optional[str]:
        value = raw.get(key)
        return str(value) if value is not None else None

    return Meta(
        company_name=text("company_name"),
        ticker=text("ticker"),
        currency=text("currency"),
        valuation_date=text("valuation_date"),
        notes=text("notes"),
    )
