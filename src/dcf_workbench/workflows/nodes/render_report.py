"""LangGraph node responsible for Markdown and HTML assembly."""
from __future__ import annotations

from dcf_workbench.reports.formatting import build_report_context
from dcf_workbench.workflows.context import WorkflowContext
from dcf_workbench.workflows.state import ValuationState


def run(state: ValuationState, context: WorkflowContext) -> ValuationState:
    logs = state.setdefault("logs", [])
    errors = state.setdefault("errors", [])
    result = state.get("valuation")
    assumption_set = state.get("assumption_set")

    if result is None or assumption_set is None or errors:
        logs.append("WritingAgent -> skipped (valuation unavailable)")
        return state

    logs.append("WritingAgent -> render Markdown and HTML output")
    meta = assumption_set.meta
    report_context = build_report_context(
        result,
        state.get("currency") or "",
        company_name=meta.company_name,
        ticker=meta.ticker,
        valuation_date=meta.valuation_date,
        notes=meta.notes,
    )
    state["markdown_report"] = context.renderer.render_template("valuation_report.md.j2", report_context)
    state["html_report"] = context.renderer.render_template("valuation_report.html.j2", report_context)
    return state
