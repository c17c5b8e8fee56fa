"""Domain service implementing the FCFF discounted-cash-flow valuation.

The engine is a pure function of its input:

- shape validation of the three per-year assumption paths
- CAPM cost of equity and a target-weight WACC
- a year-by-year FCFF schedule driven by growth, margin, tax and sales-to-capital
- a Gordon-growth terminal value with terminal growth clamped below the risk-free rate
- bridge from enterprise value to equity value and value per share

Divisions whose denominator comes straight from user input follow IEEE float
semantics, so a zero share count yields ``inf``/``nan`` instead of raising.
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Tuple, Union

import numpy as np

from dcf_workbench.domain.errors import SemanticError, ValidationError
from dcf_workbench.domain.models.valuation import (
    PATH_FIELDS,
    AssumptionSet,
    Assumptions,
    CashFlowProjection,
    CostOfCapital,
    ForecastRow,
    StartingPoint,
    TerminalValue,
    ValuationResult,
)

logger = logging.getLogger(__name__)

# Terminal growth is kept at least this far below the risk-free rate.
TERMINAL_GROWTH_SPREAD = 0.001


def clamp_terminal_growth(terminal_growth_rate: float, risk_free_rate: float) -> float:
    """Cap perpetual growth strictly below the risk-free rate."""
    return min(terminal_growth_rate, risk_free_rate - TERMINAL_GROWTH_SPREAD)


class ValuationEngine:
    """Turn an assumption set into a forecast schedule and a valuation."""

    def validate_shape(self, assumptions: Assumptions) -> None:
        years = assumptions.forecast_years
        if isinstance(years, bool) or not isinstance(years, int) or years <= 0:
            raise ValidationError(
                "assumptions.forecast_years must be a positive integer.", field="assumptions.forecast_years"
            )
        for name in PATH_FIELDS:
            values = getattr(assumptions, name)
            if not isinstance(values, (list, tuple)) or len(values) != years:
                raise ValidationError(
                    f"{name} must be an array with exactly {years} entries.",
                    field=name,
                    expected_length=years,
                )

    def compute_cost_of_capital(self, assumptions: Assumptions) -> CostOfCapital:
        cost_of_equity = assumptions.risk_free_rate + assumptions.beta * assumptions.equity_risk_premium
        # Debt shield uses the steady-state (terminal-year) tax rate.
        after_tax_cost_of_debt = assumptions.pre_tax_cost_of_debt * (1 - assumptions.tax_rate_path[-1])
        debt_weight = assumptions.target_debt_ratio
        wacc = cost_of_equity * (1 - debt_weight) + after_tax_cost_of_debt * debt_weight
        return CostOfCapital(
            cost_of_equity=cost_of_equity,
            after_tax_cost_of_debt=after_tax_cost_of_debt,
            wacc=wacc,
        )

    def project_cash_flows(self, starting_revenue: float, assumptions: Assumptions, wacc: float) -> CashFlowProjection:
        """Fold over the forecast years, carrying closing revenue into the next year."""
        rows: List[ForecastRow] = []
        revenue = float(starting_revenue)
        pv_fcff_total = 0.0
        last_fcff = 0.0

        drivers = zip(assumptions.revenue_growth, assumptions.operating_margin_path, assumptions.tax_rate_path)
        for year, (growth, margin, tax_rate) in enumerate(drivers, start=1):
            new_revenue = revenue * (1 + growth)
            ebit = new_revenue * margin
            nopat = ebit * (1 - tax_rate)
            # Shrinking revenue releases capital, so reinvestment can go negative.
            reinvestment = _divide(new_revenue - revenue, assumptions.sales_to_capital_ratio)
            fcff = nopat - reinvestment
            discount_factor = _divide(1.0, _compound(wacc, year))
            pv_fcff = fcff * discount_factor

            rows.append(
                ForecastRow(
                    year=year,
                    revenue=new_revenue,
                    margin=margin,
                    ebit=ebit,
                    tax_rate=tax_rate,
                    nopat=nopat,
                    reinvestment=reinvestment,
                    fcff=fcff,
                    discount_factor=discount_factor,
                    pv_fcff=pv_fcff,
                )
            )
            pv_fcff_total += pv_fcff
            last_fcff = fcff
            revenue = new_revenue

        return CashFlowProjection(rows=tuple(rows), pv_fcff_total=pv_fcff_total, last_fcff=last_fcff)

    def compute_terminal_value(self, last_fcff: float, wacc: float, assumptions: Assumptions) -> TerminalValue:
        terminal_growth = clamp_terminal_growth(assumptions.terminal_growth_rate, assumptions.risk_free_rate)
        if wacc <= terminal_growth:
            raise SemanticError("Invalid assumptions: WACC must be greater than terminal growth.")

        terminal_fcff = last_fcff * (1 + terminal_growth)
        terminal_value = terminal_fcff / (wacc - terminal_growth)
        pv_terminal_value = _divide(terminal_value, _compound(wacc, assumptions.forecast_years))
        return TerminalValue(
            terminal_growth=terminal_growth,
            terminal_value=terminal_value,
            pv_terminal_value=pv_terminal_value,
        )

    def aggregate(self, pv_fcff_total: float, pv_terminal_value: float, starting_point: StartingPoint) -> Tuple[float, float, float]:
        """Return ``(enterprise_value, equity_value, value_per_share)``."""
        enterprise_value = pv_fcff_total + pv_terminal_value
        equity_value = (
            enterprise_value
            - starting_point.debt
            + starting_point.cash
            + starting_point.cross_holdings
            - starting_point.minority_interest
        )
        value_per_share = _divide(equity_value, starting_point.shares_outstanding)
        return enterprise_value, equity_value, value_per_share

    def calculate(self, assumption_set: AssumptionSet) -> ValuationResult:
        assumptions = assumption_set.assumptions
        self.validate_shape(assumptions)

        capital = self.compute_cost_of_capital(assumptions)
        projection = self.project_cash_flows(assumption_set.starting_point.revenue, assumptions, capital.wacc)
        terminal = self.compute_terminal_value(projection.last_fcff, capital.wacc, assumptions)
        enterprise_value, equity_value, value_per_share = self.aggregate(
            projection.pv_fcff_total, terminal.pv_terminal_value, assumption_set.starting_point
        )
        logger.debug(
            "Valued %s over %d years: wacc=%.4f g=%.4f per_share=%s",
            assumption_set.meta.ticker or "<unnamed>",
            assumptions.forecast_years,
            capital.wacc,
            terminal.terminal_growth,
            value_per_share,
        )

        return ValuationResult(
            cost_of_equity=capital.cost_of_equity,
            after_tax_cost_of_debt=capital.after_tax_cost_of_debt,
            wacc=capital.wacc,
            terminal_growth=terminal.terminal_growth,
            terminal_value=terminal.terminal_value,
            pv_terminal_value=terminal.pv_terminal_value,
            enterprise_value=enterprise_value,
            equity_value=equity_value,
            value_per_share=value_per_share,
            forecast_rows=projection.rows,
        )


def calculate_dcf(payload: Union[AssumptionSet, Mapping[str, Any]]) -> ValuationResult:
    """Value either a parsed assumption set or a raw JSON-shaped mapping."""
    assumption_set = payload if isinstance(payload, AssumptionSet) else AssumptionSet.from_dict(payload)
    return ValuationEngine().calculate(assumption_set)


def _divide(numerator: float, denominator: float) -> float:
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        return float(np.float64(numerator) / np.float64(denominator))


def _compound(rate: float, periods: int) -> float:
    """``(1 + rate) ** periods``; overflows to ``inf`` instead of raising."""
    with np.errstate(over="ignore", invalid="ignore"):
        return float(np.power(np.float64(1 + rate), periods))
