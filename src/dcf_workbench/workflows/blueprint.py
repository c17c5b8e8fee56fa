"""Workflow blueprint describing stages and their handlers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, TYPE_CHECKING

from dcf_workbench.workflows.nodes import parse_payload, render_report, valuation

if TYPE_CHECKING:
    from dcf_workbench.workflows.context import WorkflowContext
    from dcf_workbench.workflows.state import ValuationState


@dataclass
class StageSpec:
    """Single LangGraph stage definition."""

    key: str
    description: str
    handler: Callable[["ValuationState", "WorkflowContext"], "ValuationState"]
    depends_on: List[str] = field(default_factory=list)


def build_default_stages() -> List[StageSpec]:
    """Return the ordered stages for the valuation workflow."""
    return [
        StageSpec(
            key="parse_payload",
            description="Extract the JSON document and check every field of the assumption schema.",
            handler=parse_payload.run,
        ),
        StageSpec(
            key="valuation",
            description="Project FCFF, apply the terminal-growth guardrail and bridge to value per share.",
            handler=valuation.run,
            depends_on=["parse_payload"],
        ),
        StageSpec(
            key="render_report",
            description="Render Markdown and HTML summaries with formatted metrics and forecast table.",
            handler=render_report.run,
            depends_on=["valuation"],
        ),
    ]
