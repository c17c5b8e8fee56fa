"""LangGraph node turning pasted text or a decoded mapping into an AssumptionSet."""
from __future__ import annotations

from dcf_workbench.domain.errors import DcfError
from dcf_workbench.domain.models.valuation import AssumptionSet
from dcf_workbench.llm.cleaning import extract_json_payload
from dcf_workbench.workflows.context import WorkflowContext
from dcf_workbench.workflows.state import ValuationState


def run(state: ValuationState, context: WorkflowContext) -> ValuationState:
    logs = state.setdefault("logs", [])
    errors = state.setdefault("errors", [])

    payload = state.get("payload")
    try:
        if payload is None:
            raw = state.get("raw_input")
            if not raw or not raw.strip():
                errors.append("No assumption document supplied.")
                return state
            logs.append("ParseAgent -> extract JSON from raw input")
            payload = extract_json_payload(raw)
            state["payload"] = payload
        assumption_set = AssumptionSet.from_dict(payload)
    except DcfError as exc:
        errors.append(str(exc))
        return state

    state["assumption_set"] = assumption_set
    state["currency"] = (
        state.get("currency_override") or assumption_set.meta.currency or context.config.default_currency
    )
    logs.append(
        f"ParseAgent -> parsed {assumption_set.assumptions.forecast_years}-year assumption set"
        f" for {assumption_set.meta.company_name or 'unnamed company'}"
    )
    return state
