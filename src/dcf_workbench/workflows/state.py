"""Workflow state definitions shared by LangGraph nodes."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, TypedDict

from dcf_workbench.domain.models.valuation import AssumptionSet, ValuationResult


class ValuationState(TypedDict, total=False):
    raw_input: Optional[str]
    payload: Optional[Dict[str, Any]]
    currency_override: Optional[str]

    assumption_set: Optional[AssumptionSet]
    currency: str
    valuation: Optional[ValuationResult]

    markdown_report: Optional[str]
    html_report: Optional[str]
    stage_order: List[str]

    logs: List[str]
    errors: List[str]
