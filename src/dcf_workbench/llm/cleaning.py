"""Helpers to recover the JSON document from raw text-generator output."""
from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional

from dcf_workbench.domain.errors import ValidationError


def clean_llm_output(text: str) -> str:
    """Remove 'Thinking.../Planning' scaffolding and quoted planning lines."""
    if not text:
        return ""
    cleaned = str(text).strip()
    cleaned = re.sub(r"(?is)^\s*\*?(?:Thinking|Planning)[^.]*\*?.*?(?:\n{2,}|$)", "", cleaned)
    cleaned = re.sub(r"(?im)^>.*\n", "", cleaned)
    cleaned = re.sub(r"\n{3,}", "\n\n", cleaned)
    return cleaned.strip()


def _locate_object(text: str) -> Optional[str]:
    """Return the fenced block or outermost-brace span of *text*, if any."""
    fenced = re.search(r"```(?:json)?\s*(.*?)```", text, flags=re.DOTALL | re.IGNORECASE)
    if fenced:
        text = fenced.group(1).strip()
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    return text[start : end + 1]


def extract_json_payload(text: str) -> Dict[str, Any]:
    """Parse the JSON object embedded in generator output.

    Markdown code fences and any prose around the outermost braces are dropped
    before parsing. The scrubbed text is tried first, then the raw text, since
    chatter without a trailing blank line scrubs away the document as well.
    """
    candidates: List[str] = []
    for source in (clean_llm_output(text), str(text or "")):
        located = _locate_object(source)
        if located is not None and located not in candidates:
            candidates.append(located)
    if not candidates:
        raise ValidationError("Invalid JSON: no JSON object found in input.", field="$")

    error: Optional[json.JSONDecodeError] = None
    for candidate in candidates:
        try:
            payload = json.loads(candidate)
        except json.JSONDecodeError as exc:
            error = error or exc
            continue
        if not isinstance(payload, dict):
            raise ValidationError("Invalid JSON: top-level value must be an object.", field="$")
        return payload
    raise ValidationError(
        f"Invalid JSON: {error.msg} (line {error.lineno}, column {error.colno}).", field="$"
    ) from error
