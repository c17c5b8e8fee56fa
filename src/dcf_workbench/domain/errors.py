"""Error taxonomy shared by the valuation engine and its callers."""
from __future__ import annotations

from typing import Optional


class DcfError(Exception):
    """Base class for every failure raised while valuing an assumption set."""


class ValidationError(DcfError, ValueError):
    """Structural problem with the input document (missing field, wrong type, bad length)."""

    def __init__(self, message: str, *, field: Optional[str] = None, expected_length: Optional[int] = None) -> None:
        super().__init__(message)
        self.field = field
        self.expected_length = expected_length


class SemanticError(DcfError, ValueError):
    """Assumptions that parse cleanly but describe a financially invalid model."""
