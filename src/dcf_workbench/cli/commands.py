"""CLI command definitions for the DCF workbench."""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from dcf_workbench.config import Config
from dcf_workbench.domain.services.examples import build_example_payload
from dcf_workbench.prompts.builder import PromptRequest, build_system_prompt
from dcf_workbench.reports.formatting import FORECAST_COLUMNS, forecast_table, metric_rows
from dcf_workbench.settings.loader import load_settings
from dcf_workbench.utils.logging import configure_logging
from dcf_workbench.workflows.graph import ValuationWorkflow
from dcf_workbench.workflows.state import ValuationState

console = Console()
app = typer.Typer(help="Build DCF assumption prompts and value FCFF assumption sets from the terminal.")


@dataclass
class AppContext:
    """Holds reusable process-wide objects for CLI commands."""

    config: Config
    workflow: ValuationWorkflow


def _init_context(debug_override: Optional[bool] = None) -> AppContext:
    """Create a context with configuration, logging, and workflow wiring."""
    config = load_settings(debug_override=debug_override)
    configure_logging(debug=config.debug)
    workflow = ValuationWorkflow(config=config)
    return AppContext(config=config, workflow=workflow)


@app.callback()
def main_callback(
    ctx: typer.Context,
    debug: Optional[bool] = typer.Option(
        None,
        "--debug/--no-debug",
        help="Temporarily toggle verbose logging without touching environment variables.",
    ),
) -> None:
    """Attach the lazily constructed application context to Typer."""
    ctx.obj = _init_context(debug_override=debug)


@app.command()
def prompt(
    ctx: typer.Context,
    company_name: Optional[str] = typer.Option(None, "--company", help="Company display name."),
    ticker: Optional[str] = typer.Option(None, "--ticker", help="Exchange ticker, e.g. AAPL."),
    region: Optional[str] = typer.Option(None, "--region", help="Operating region or listing market."),
    currency: Optional[str] = typer.Option(None, "--currency", help="Reporting currency code."),
    forecast_years: Optional[int] = typer.Option(None, "--forecast-years", help="Explicit forecast length in years."),
    guardrail: Optional[str] = typer.Option(None, "--guardrail", help="Terminal growth guardrail wording."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the prompt to a file instead of stdout."),
) -> None:
    """Print the system prompt for an external JSON generator."""
    if ctx.obj is None:
        raise typer.Exit(code=1)
    context: AppContext = ctx.obj

    request = PromptRequest(
        company_name=company_name,
        ticker=ticker,
        region=region,
        currency=currency or context.config.default_currency,
        forecast_years=forecast_years or context.config.default_forecast_years,
        guardrail=guardrail or context.config.guardrail_text,
    )
    text = build_system_prompt(request)
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        console.print(f"System prompt written to {output}")
        return
    typer.echo(text)


@app.command()
def example(
    ctx: typer.Context,
    forecast_years: Optional[int] = typer.Option(None, "--forecast-years", help="Length of the example paths."),
    company_name: Optional[str] = typer.Option(None, "--company", help="Override meta.company_name."),
    ticker: Optional[str] = typer.Option(None, "--ticker", help="Override meta.ticker."),
    currency: Optional[str] = typer.Option(None, "--currency", help="Override meta.currency."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the JSON to a file instead of stdout."),
) -> None:
    """Emit an example assumption document."""
    if ctx.obj is None:
        raise typer.Exit(code=1)
    context: AppContext = ctx.obj

    payload = build_example_payload(
        forecast_years or context.config.default_forecast_years,
        company_name=company_name,
        ticker=ticker,
        currency=currency,
    )
    text = json.dumps(payload, indent=2)
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        console.print(f"Example JSON written to {output}")
        return
    typer.echo(text)


@app.command()
def calculate(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Path to the assumption JSON, or '-' to read stdin."),
    currency: Optional[str] = typer.Option(None, "--currency", help="Currency label overriding meta.currency."),
    markdown_path: Optional[Path] = typer.Option(None, "--markdown", help="Write the Markdown report here."),
    html_path: Optional[Path] = typer.Option(None, "--html", help="Write the HTML report here."),
    emit_json: bool = typer.Option(False, "--json", help="Persist the merged workflow state to JSON."),
) -> None:
    """Value an assumption document and print the results."""
    if ctx.obj is None:
        raise typer.Exit(code=1)
    context: AppContext = ctx.obj

    if source == "-":
        raw = sys.stdin.read()
        label = "stdin"
    else:
        path = Path(source)
        if not path.is_file():
            console.print(f"[bold red]Input file not found: {path}[/bold red]")
            raise typer.Exit(code=1)
        raw = path.read_text(encoding="utf-8")
        label = path.stem

    console.rule(f"Valuing {label}")
    result: ValuationState = context.workflow.run(raw, currency=currency)

    if result.get("errors"):
        console.print("[bold red]Valuation failed:[/bold red]")
        for issue in result["errors"]:
            console.print(f"- {issue}", markup=False, soft_wrap=True)
        raise typer.Exit(code=1)

    _print_results(result)

    if emit_json:
        context.config.ensure_directories()
        target = context.config.output_dir / f"{label}_state.json"
        context.workflow.persist_state(result, target)
        console.print(f"State saved to {target}")
    if markdown_path is not None and result.get("markdown_report"):
        context.workflow.persist_markdown(result["markdown_report"], markdown_path)
        console.print(f"Markdown report available at {markdown_path}")
    if html_path is not None and result.get("html_report"):
        context.workflow.persist_html(result["html_report"], html_path)
        console.print(f"HTML report available at {html_path}")


@app.command()
def plan(ctx: typer.Context) -> None:
    """Display the workflow stages for quick operator reference."""
    if ctx.obj is None:
        raise typer.Exit(code=1)

    context: AppContext = ctx.obj
    table = Table(title="Workflow Stages")
    table.add_column("Step", style="cyan")
    table.add_column("Description")

    for idx, step in enumerate(context.workflow.describe_stages(), start=1):
        table.add_row(str(idx), step)

    console.print(table)


def _print_results(state: ValuationState) -> None:
    """Pretty-print headline metrics and the forecast schedule."""
    valuation = state["valuation"]
    currency = state.get("currency") or ""

    summary = Table(title="Valuation Summary", show_header=True, header_style="bold magenta")
    summary.add_column("Metric")
    summary.add_column("Value", justify="right")
    for label, value in metric_rows(valuation, currency):
        summary.add_row(label, value)
    console.print(summary)

    schedule = Table(title="Explicit Forecast", show_header=True, header_style="bold cyan")
    for _, title in FORECAST_COLUMNS:
        schedule.add_column(title, justify="right")
    for row in forecast_table(valuation, currency):
        schedule.add_row(*(row[key] for key, _ in FORECAST_COLUMNS))
    console.print(schedule)
