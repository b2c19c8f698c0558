"""Built-in flows: name capture and the 6-step room reservation waterfall.

The canonical definitions live in hotelbot/workflows/data/*.jsonl.
"""

from __future__ import annotations

from pathlib import Path

from hotelbot.models.conversation import FlowId
from hotelbot.workflows.loader import load_flow_jsonl
from hotelbot.workflows.schema import FlowDef

DATA_DIR = Path(__file__).resolve().parent / "data"

NAME_CAPTURE_FLOW: FlowDef = load_flow_jsonl(DATA_DIR / "name_capture.jsonl")
RESERVATION_FLOW: FlowDef = load_flow_jsonl(DATA_DIR / "reservation.jsonl")

BUILTIN_FLOWS: dict[FlowId, FlowDef] = {
    NAME_CAPTURE_FLOW.id: NAME_CAPTURE_FLOW,
    RESERVATION_FLOW.id: RESERVATION_FLOW,
}
