"""Read a flow definition (one JSON object on one line) into a FlowDef."""

from __future__ import annotations

import json
from pathlib import Path

from hotelbot.workflows.schema import FlowDef, StepKind


def load_flow_jsonl(path: str | Path) -> FlowDef:
    """Parse and check the flow on the first non-blank line of ``path``.

    Raises ValueError if the file holds no flow or the flow cannot be run.
    """
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        line = next((raw for raw in f if raw.strip()), None)
    if line is None:
        raise ValueError(f"{path} holds no flow definition")
    return _parse_flow(json.loads(line))


def _parse_flow(data: dict) -> FlowDef:
    """Parse a raw dict into a FlowDef and check its step layout."""
    flow = FlowDef.model_validate(data)
    check_flow(flow)
    return flow


def check_flow(flow: FlowDef) -> None:
    """Raise ValueError unless the flow can be run as a waterfall.

    Every step but the last prompts for input; the last step ends the
    flow; only the first step has no action to apply.
    """
    if len(flow.steps) < 2:
        raise ValueError(f"Flow {flow.id.value} needs at least two steps")

    ids = flow.step_ids
    if len(set(ids)) != len(ids):
        raise ValueError(f"Flow {flow.id.value} has duplicate step ids")

    *prompt_steps, last = flow.steps
    for i, step in enumerate(prompt_steps):
        if step.kind is not StepKind.PROMPT:
            raise ValueError(f"Step {step.id} must be a prompt step")
        if step.prompt_id is None or not step.prompt:
            raise ValueError(f"Prompt step {step.id} needs prompt_id and prompt")
        if (i == 0) != (step.action is None):
            raise ValueError(f"Step {step.id}: only the first step has no action")
    if last.kind is not StepKind.END or last.action is None:
        raise ValueError(f"Last step {last.id} must be an end step with an action")
