"""Pydantic models for waterfall flow definitions.

A flow is an ordered list of steps.  Step ``i`` receives the validated
reply to step ``i-1``'s prompt, applies its ``action`` to store it, and
then either issues its own prompt (``kind="prompt"``) or ends the flow
(``kind="end"``) with a closing message.

Text fields may contain ``{{placeholder}}`` patterns that are filled from
the conversation when rendered (see WaterfallEngine.render).
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from hotelbot.models.conversation import FlowId, PromptId


class StepKind(str, Enum):
    PROMPT = "prompt"
    END = "end"


class StepAction(str, Enum):
    """Completion logic applied to the previous step's result."""

    STORE_START_DATE = "store_start_date"
    STORE_STAY_LENGTH = "store_stay_length"
    STORE_OCCUPANTS = "store_occupants"
    STORE_BED_SIZE = "store_bed_size"
    CONFIRM_ORDER = "confirm_order"
    STORE_NAME = "store_name"


class StepDef(BaseModel):
    """One step in a waterfall flow."""

    id: str
    kind: StepKind = StepKind.PROMPT
    action: Optional[StepAction] = None    # None only for the first step
    prompt_id: Optional[PromptId] = None   # validator for the reply
    prompt: str = ""                       # question asked by a prompt step
    retry_prompt: str = ""                 # sent before the prompt on rejection
    choices: list[str] = []                # labels for choice prompts
    message: str = ""                      # closing message of an end step
    cancel_message: str = ""               # closing message when the user declines


class FlowDef(BaseModel):
    """A complete waterfall flow definition."""

    id: FlowId
    name: str = ""
    trigger_keywords: list[str] = []
    steps: list[StepDef] = []

    @property
    def step_ids(self) -> list[str]:
        return [step.id for step in self.steps]
