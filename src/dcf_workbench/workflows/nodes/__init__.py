"""Convenience re-exports for workflow nodes."""
from __future__ import annotations

from . import parse_payload, render_report, valuation

__all__ = [
    "parse_payload",
    "render_report",
    "valuation",
]
