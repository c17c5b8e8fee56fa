from __future__ import annotations

import re

from dcf_workbench.prompts.builder import PromptRequest, build_system_prompt


def test_prompt_embeds_company_metadata_and_horizon():
    text = build_system_prompt(
        PromptRequest(
            company_name="Acme Corp",
            ticker="ACME",
            region="Germany",
            currency="EUR",
            forecast_years=7,
            guardrail="<= 2%",
        )
    )

    assert "- Name: Acme Corp" in text
    assert "- Ticker: ACME" in text
    assert "- Region: Germany" in text
    assert "- Currency: EUR" in text
    assert "- Explicit forecast length: 7 years" in text
    assert "Terminal growth must respect guardrail: <= 2%." in text
    assert '"forecast_years": 7,' in text
    assert "All currency amounts are in EUR millions." in text


def test_prompt_falls_back_for_blank_inputs():
    text = build_system_prompt(PromptRequest(company_name="   ", ticker="", forecast_years=0))

    assert "- Name: Unknown Company" in text
    assert "- Ticker: N/A" in text
    assert "- Currency: USD" in text
    assert "- Explicit forecast length: 10 years" in text
    assert "guardrail: <= risk-free rate." in text


def test_prompt_declares_every_schema_field():
    text = build_system_prompt()

    for field in [
        "revenue",
        "operating_margin",
        "tax_rate",
        "debt",
        "cash",
        "shares_outstanding",
        "minority_interest",
        "cross_holdings",
        "revenue_growth",
        "operating_margin_path",
        "tax_rate_path",
        "sales_to_capital_ratio",
        "risk_free_rate",
        "equity_risk_premium",
        "beta",
        "pre_tax_cost_of_debt",
        "target_debt_ratio",
        "terminal_growth_rate",
    ]:
        assert re.search(rf'"{field}":', text), field
    assert "Arrays must exactly match forecast_years length." in text
    assert "All rates are decimals (0.08 = 8%)." in text
    assert text.rstrip().endswith("Return valid JSON object only.")


def test_prompt_is_not_html_escaped():
    text = build_system_prompt(PromptRequest(company_name="AT&T <Inc>"))

    assert "- Name: AT&T <Inc>" in text
