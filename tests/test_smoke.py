"""Basic smoke tests for configuration and workflow wiring."""
from __future__ import annotations

import pytest

from dcf_workbench.config import Config
from dcf_workbench.settings.loader import load_settings
from dcf_workbench.workflows.blueprint import build_default_stages
from dcf_workbench.workflows.graph import ValuationWorkflow


def test_config_defaults(monkeypatch):
    for name in ["APP_DEBUG", "OUTPUT_DIR", "DCF_DEFAULT_CURRENCY", "DCF_DEFAULT_FORECAST_YEARS", "DCF_GUARDRAIL_TEXT"]:
        monkeypatch.delenv(name, raising=False)
    cfg = Config.from_env()
    assert cfg.debug is False
    assert cfg.default_currency == "USD"
    assert cfg.default_forecast_years == 10


def test_config_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("APP_DEBUG", "yes")
    monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "out"))
    monkeypatch.setenv("DCF_DEFAULT_CURRENCY", "EUR")
    monkeypatch.setenv("DCF_DEFAULT_FORECAST_YEARS", "not-a-number")
    cfg = Config.from_env()
    assert cfg.debug is True
    assert cfg.default_currency == "EUR"
    assert cfg.default_forecast_years == 10
    cfg.ensure_directories()
    assert (tmp_path / "out").is_dir()


def test_load_settings_applies_debug_override(monkeypatch):
    monkeypatch.setenv("APP_DEBUG", "1")
    assert load_settings(debug_override=False).debug is False


def test_workflow_stages():
    workflow = ValuationWorkflow(Config())
    stages = workflow.describe_stages()
    assert len(stages) == 3
    assert stages[0].startswith("parse_payload")
    assert stages[-1].startswith("render_report")


def test_workflow_rejects_stage_running_before_its_dependency():
    stages = build_default_stages()
    stages[1], stages[2] = stages[2], stages[1]
    with pytest.raises(RuntimeError, match="render_report"):
        ValuationWorkflow(Config(), stages=stages)


def test_workflow_rejects_unknown_dependency():
    stages = build_default_stages()
    stages[0].depends_on = ["fetch_market_data"]
    with pytest.raises(RuntimeError, match="fetch_market_data"):
        ValuationWorkflow(Config(), stages=stages)
