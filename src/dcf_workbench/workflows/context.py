"""Workflow dependency container."""
from __future__ import annotations

from dataclasses import dataclass

from dcf_workbench.config import Config
from dcf_workbench.domain.services.valuation import ValuationEngine
from dcf_workbench.reports.renderer import ReportRenderer


@dataclass
class WorkflowContext:
    """Holds dependencies shared by LangGraph nodes."""

    config: Config
    valuation_engine: ValuationEngine
    renderer: ReportRenderer
