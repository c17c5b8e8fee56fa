import json

import pytest

from dcf_workbench.domain.errors import ValidationError
from dcf_workbench.domain.services.examples import build_example_payload
from dcf_workbench.llm.cleaning import clean_llm_output, extract_json_payload


def test_clean_llm_output_strips_thinking_and_quotes():
    raw = "*Thinking...*\n\n> step 1\n> step 2\n\nMain body text.\n\nMore."
    cleaned = clean_llm_output(raw)
    assert "Thinking" not in cleaned
    assert "step 1" not in cleaned
    assert cleaned.startswith("Main body text.")


def test_extract_json_payload_unwraps_fenced_block():
    raw = (
        "*Thinking...*\n\n> weighing margins\n\n"
        "Here are the assumptions:\n```json\n{\"assumptions\": {\"forecast_years\": 5}}\n```\nDone."
    )
    assert extract_json_payload(raw) == {"assumptions": {"forecast_years": 5}}


def test_extract_json_payload_accepts_plain_json():
    assert extract_json_payload('  {"a": [1, 2]}  ') == {"a": [1, 2]}


@pytest.mark.parametrize("raw", ["no braces here", '{"a": 1,}', "[1, 2]"])
def test_extract_json_payload_rejects_malformed_input(raw):
    with pytest.raises(ValidationError, match="Invalid JSON"):
        extract_json_payload(raw)


def test_extract_json_payload_survives_chatter_without_blank_line():
    document = build_example_payload(2)
    raw = "Thinking about the assumptions\n" + json.dumps(document)
    assert extract_json_payload(raw) == document


def test_extract_json_payload_survives_chatter_before_fence_without_blank_line():
    document = build_example_payload(2)
    raw = "*Thinking...*\n```json\n" + json.dumps(document, indent=2) + "\n```"
    assert extract_json_payload(raw) == document
