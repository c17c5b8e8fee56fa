"""Application-wide configuration defaults and helpers."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def _to_bool(value: Optional[str], default: bool = False) -> bool:
    """Parse truthy environment values like '1' or 'true'."""
    if value is None:
        return default
    # Normalize non-string inputs (e.g., int defaults) before parsing.
    if not isinstance(value, str):
        value = str(value)
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_int(value: Optional[str]) -> Optional[int]:
    """Safely parse an integer env var, returning None on failure."""
    if value is None:
        return None
    try:
        parsed = int(str(value).strip())
        return parsed
    except (TypeError, ValueError):
        return None


@dataclass
class Config:
    """Runtime configuration loaded from environment variables."""

    debug: bool = False
    output_dir: Path = Path("reports")
    default_currency: str = "USD"
    default_forecast_years: int = 10
    guardrail_text: str = "<= risk-free rate"

    @classmethod
    def from_env(cls) -> "Config":
        """Build a configuration instance using environment overrides."""
        years = _to_int(os.getenv("DCF_DEFAULT_FORECAST_YEARS"))
        return cls(
            debug=_to_bool(os.getenv("APP_DEBUG")),
            output_dir=Path(os.getenv("OUTPUT_DIR", "reports")),
            default_currency=(os.getenv("DCF_DEFAULT_CURRENCY") or "USD").strip() or "USD",
            default_forecast_years=years if years and years > 0 else 10,
            guardrail_text=os.getenv("DCF_GUARDRAIL_TEXT") or "<= risk-free rate",
        )

    def ensure_directories(self) -> None:
        """Create directories needed for runtime artifacts."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
