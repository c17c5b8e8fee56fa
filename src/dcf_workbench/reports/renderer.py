"""Report rendering helpers using Jinja2 templates."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"


@dataclass
class ReportRenderer:
    """Render text artifacts from structured valuation outputs."""

    template_dir: Path = TEMPLATE_DIR
    template_name: str = "valuation_report.md.j2"

    def __post_init__(self) -> None:
        self._env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            # Only *.html.j2 output is escaped; prompts and Markdown stay verbatim.
            autoescape=select_autoescape(enabled_extensions=("html.j2",), default_for_string=False),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, context: Dict[str, Any]) -> str:
        """Render the configured template with supplied context."""
        return self.render_template(self.template_name, context)

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        template = self._env.get_template(template_name)
        return template.render(**context)
