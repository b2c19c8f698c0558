"""Per-conversation state persisted between turns."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .reservation import RoomReservation


class FlowId(str, Enum):
    NAME_CAPTURE = "name_capture"
    RESERVATION = "reservation"


class PromptId(str, Enum):
    """Validator expected to interpret the next inbound message."""

    TEXT = "text"
    DATE = "date"
    NUMBER = "number"
    CHOICE = "choice"
    CONFIRM = "confirm"


class ConversationState(BaseModel):
    """Everything needed to resume a conversation on the next turn.

    The ``(active_flow_id, active_step_index, pending_prompt_id)`` triple is
    the waterfall cursor: ``active_step_index`` points at the step that
    issued the last prompt, and ``pending_prompt_id`` names the validator for
    the reply to it. The flow id and prompt id are set and cleared together.
    """

    turn_count: int = Field(default=0, ge=0)
    active_flow_id: Optional[FlowId] = None
    active_step_index: int = Field(default=0, ge=0)
    pending_prompt_id: Optional[PromptId] = None
    reservation: RoomReservation = Field(default_factory=RoomReservation)

    @property
    def is_idle(self) -> bool:
        return self.active_flow_id is None

    def is_consistent(self) -> bool:
        """True when the flow id and prompt id are paired."""
        if self.active_flow_id is None:
            return self.pending_prompt_id is None and self.active_step_index == 0
        return self.pending_prompt_id is not None

    def await_input(self, flow_id: FlowId, step_index: int, prompt_id: PromptId) -> None:
        """Point the cursor at the step that just issued a prompt."""
        self.active_flow_id = flow_id
        self.active_step_index = step_index
        self.pending_prompt_id = prompt_id

    def clear_flow(self) -> None:
        """Return to Idle. Reservation slots are left for inspection."""
        self.active_flow_id = None
        self.active_step_index = 0
        self.pending_prompt_id = None

    def reset(self) -> None:
        """Return to Idle and drop the in-progress reservation."""
        self.clear_flow()
        self.reservation = RoomReservation()
