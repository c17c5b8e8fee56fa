"""LangGraph node for the DCF valuation."""
from __future__ import annotations

from dcf_workbench.domain.errors import DcfError
from dcf_workbench.workflows.context import WorkflowContext
from dcf_workbench.workflows.state import ValuationState


def run(state: ValuationState, context: WorkflowContext) -> ValuationState:
    logs = state.setdefault("logs", [])
    errors = state.setdefault("errors", [])
    assumption_set = state.get("assumption_set")

    if assumption_set is None:
        logs.append("ValuationAgent -> skipped (no parsed assumption set)")
        return state

    logs.append("ValuationAgent -> execute FCFF DCF")
    try:
        result = context.valuation_engine.calculate(assumption_set)
    except DcfError as exc:
        errors.append(str(exc))
        return state

    invalid = result.non_finite_fields()
    if invalid:
        errors.append(f"Valuation produced non-finite values: {', '.join(invalid)}")
    state["valuation"] = result
    return state
