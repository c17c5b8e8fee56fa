"""LangGraph workflow assembly for the parse -> value -> render pipeline."""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from langgraph.graph import END, StateGraph

from dcf_workbench.config import Config
from dcf_workbench.domain.services.valuation import ValuationEngine
from dcf_workbench.reports.renderer import ReportRenderer
from dcf_workbench.workflows import context as context_module
from dcf_workbench.workflows.blueprint import StageSpec, build_default_stages
from dcf_workbench.workflows.state import ValuationState

logger = logging.getLogger(__name__)


class ValuationWorkflow:
    """Compose LangGraph nodes into a runnable workflow."""

    def __init__(self, config: Config, stages: Optional[List[StageSpec]] = None) -> None:
        self._config = config
        self._context = self._build_context()
        self._stages: List[StageSpec] = stages if stages is not None else build_default_stages()
        self._graph = self._build_graph()

    def _build_context(self) -> context_module.WorkflowContext:
        return context_module.WorkflowContext(
            config=self._config,
            valuation_engine=ValuationEngine(),
            renderer=ReportRenderer(),
        )

    def _build_graph(self):
        builder = StateGraph(dict)

        if not self._stages:
            raise RuntimeError("Workflow blueprint is empty; cannot build LangGraph.")
        _check_dependencies(self._stages)

        for stage in self._stages:
            builder.add_node(stage.key, self._wrap(stage.key, stage.handler))

        builder.set_entry_point(self._stages[0].key)
        for current, nxt in zip(self._stages, self._stages[1:]):
            builder.add_edge(current.key, nxt.key)
        builder.add_edge(self._stages[-1].key, END)

        return builder.compile(checkpointer=None)

    def _wrap(self, key: str, func: Callable[[ValuationState, context_module.WorkflowContext], ValuationState]):
        def wrapper(state: Dict[str, Any]) -> Dict[str, Any]:
            logger.debug("Running stage %s", key)
            return func(state, self._context)

        return wrapper

    def run(
        self,
        raw_input: Optional[str] = None,
        *,
        payload: Optional[Mapping[str, Any]] = None,
        currency: Optional[str] = None,
    ) -> ValuationState:
        """Execute the workflow for one assumption document (text or decoded mapping)."""
        initial_state: ValuationState = {
            "raw_input": raw_input,
            "payload": dict(payload) if payload is not None else None,
            "currency_override": currency,
            "logs": [],
            "errors": [],
            "stage_order": [stage.key for stage in self._stages],
        }
        result: ValuationState = self._graph.invoke(initial_state)
        for issue in result.get("errors", []):
            logger.warning(issue)
        return result  # type: ignore[return-value]

    def persist_state(self, state: ValuationState, path: Path) -> None:
        """Serialize the workflow state to disk for debugging or auditing."""
        path.parent.mkdir(parents=True, exist_ok=True)
        serializable = dict(state)
        if state.get("valuation") is not None:
            serializable["valuation"] = state["valuation"].to_dict()
        payload = json.dumps(serializable, default=_json_serializer, indent=2, ensure_ascii=False)
        path.write_text(payload, encoding="utf-8")

    def persist_markdown(self, markdown: str, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(markdown, encoding="utf-8")

    def persist_html(self, html: str, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding="utf-8")

    def describe_stages(self) -> List[str]:
        """Return human-readable workflow stage descriptions."""
        return [f"{stage.key}: {stage.description}" for stage in self._stages]


def _json_serializer(value: Any) -> Any:
    if is_dataclass(value):
        return asdict(value)
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if hasattr(value, "tolist"):
        return value.tolist()
    return str(value)


def _check_dependencies(stages: List[StageSpec]) -> None:
    """Stages run in list order, so each dependency must name an earlier stage."""
    seen: List[str] = []
    for stage in stages:
        for dependency in stage.depends_on:
            if dependency not in seen:
                raise RuntimeError(
                    f"Stage '{stage.key}' depends on '{dependency}', which does not run before it."
                )
        seen.append(stage.key)
