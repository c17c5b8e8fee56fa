from __future__ import annotations

import json
import math

from dcf_workbench.config import Config
from dcf_workbench.domain.services.examples import build_example_payload
from dcf_workbench.workflows.graph import ValuationWorkflow


def make_workflow() -> ValuationWorkflow:
    return ValuationWorkflow(Config())


def test_workflow_values_decoded_payload():
    state = make_workflow().run(payload=build_example_payload(5))

    assert state["errors"] == []
    assert state["currency"] == "USD"
    assert state["valuation"].value_per_share > 0
    assert "Value per Share" in state["markdown_report"]
    assert "<table" in state["html_report"]
    assert any(line.startswith("ValuationAgent") for line in state["logs"])


def test_workflow_extracts_json_from_generator_text():
    raw = "Sure, here you go:\n```json\n" + json.dumps(build_example_payload(3)) + "\n```"
    state = make_workflow().run(raw, currency="GBP")

    assert state["errors"] == []
    assert state["currency"] == "GBP"
    assert len(state["valuation"].forecast_rows) == 3


def test_workflow_reports_shape_error_verbatim():
    payload = build_example_payload(4)
    payload["assumptions"]["revenue_growth"] = payload["assumptions"]["revenue_growth"][:2]

    state = make_workflow().run(payload=payload)

    assert state["errors"] == ["revenue_growth must be an array with exactly 4 entries."]
    assert state.get("valuation") is None
    assert state.get("markdown_report") is None


def test_workflow_reports_guardrail_error_and_discards_rows():
    payload = build_example_payload(3)
    payload["assumptions"].update(
        {
            "risk_free_rate": 0.01,
            "beta": 0.0,
            "equity_risk_premium": 0.0,
            "pre_tax_cost_of_debt": 0.0,
            "target_debt_ratio": 1.0,
            "terminal_growth_rate": 0.5,
        }
    )

    state = make_workflow().run(payload=payload)

    assert state["errors"] == ["Invalid assumptions: WACC must be greater than terminal growth."]
    assert state.get("valuation") is None


def test_workflow_flags_non_finite_results():
    payload = build_example_payload(3)
    payload["starting_point"]["shares_outstanding"] = 0

    state = make_workflow().run(payload=payload)

    assert state["errors"] == ["Valuation produced non-finite values: value_per_share"]
    assert math.isinf(state["valuation"].value_per_share)
    assert state.get("markdown_report") is None


def test_workflow_rejects_empty_input():
    state = make_workflow().run("   ")

    assert state["errors"] == ["No assumption document supplied."]


def test_persist_state_writes_json(tmp_path):
    workflow = make_workflow()
    state = workflow.run(payload=build_example_payload(2))
    target = tmp_path / "state.json"

    workflow.persist_state(state, target)

    saved = json.loads(target.read_text(encoding="utf-8"))
    assert saved["valuation"]["forecastRows"][1]["year"] == 2
    assert saved["assumption_set"]["assumptions"]["forecast_years"] == 2


def test_workflow_survives_extreme_discount_rate():
    payload = build_example_payload(60)
    payload["assumptions"]["beta"] = 1e5
    payload["assumptions"]["equity_risk_premium"] = 1e5
    state = make_workflow().run(payload=payload)

    assert state["errors"] == []
    assert state["valuation"].forecast_rows[-1].discount_factor == 0.0
