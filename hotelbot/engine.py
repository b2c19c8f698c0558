"""Waterfall engine: runs flows one prompt per turn from a persisted cursor.

Nothing survives between turns except ConversationState, so the engine
never suspends: it runs exactly one step per call and records where it
stopped in the ``(active_flow_id, active_step_index, pending_prompt_id)``
cursor.  On the next turn:

  1. The step at ``active_step_index`` (the one that asked the question)
     is looked up and its validator parses the reply
  2. On rejection the same prompt is sent again and the cursor is untouched
  3. On success the following step applies its action to store the value,
     then either asks its own question (cursor moves to it) or ends the
     flow (cursor cleared) with a closing message
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from hotelbot.errors import MalformedStateError, PromptRejected
from hotelbot.models.conversation import ConversationState, FlowId, PromptId
from hotelbot.models.reservation import BedSize, RoomReservation
from hotelbot.models.user import UserIdentity
from hotelbot.prompts.validators import format_choices, get_validator, normalize_text
from hotelbot.workflows.builtin import BUILTIN_FLOWS
from hotelbot.workflows.schema import FlowDef, StepAction, StepDef, StepKind

log = logging.getLogger("hotelbot.engine")


def redact_pii(value: str) -> str:
    """Mask PII for logging: show first 3 and last 2 chars only."""
    if not value or len(value) <= 5:
        return "***"
    return value[:3] + "***" + value[-2:]


def new_order_reference() -> str:
    """Time-derived order reference with a random suffix, e.g. HB-261019153012-4F9A2C1D."""
    return f"HB-{datetime.now():%y%m%d%H%M%S}-{secrets.token_hex(4).upper()}"


@dataclass
class TurnContext:
    """Records loaded for one turn plus the replies produced so far."""

    conversation_key: str
    state: ConversationState
    identity: UserIdentity
    replies: list[str] = field(default_factory=list)
    identity_changed: bool = False

    def reply(self, text: str) -> None:
        self.replies.append(text)


class WaterfallEngine:
    """Starts and resumes flows against a TurnContext.

    Typical use from the router::

        engine.begin(FlowId.NAME_CAPTURE, turn)   # first question
        ...                                       # state saved, turn ends
        engine.resume(user_text, turn)            # next turn, next question
    """

    def __init__(
        self,
        flows: dict[FlowId, FlowDef] | None = None,
        reference_factory: Callable[[], str] = new_order_reference,
    ) -> None:
        self._flows = flows or BUILTIN_FLOWS
        self._reference_factory = reference_factory

    # ── Public API ────────────────────────────────────────────

    def get_flow(self, flow_id: FlowId) -> FlowDef:
        flow = self._flows.get(flow_id)
        if flow is None:
            raise MalformedStateError(f"Unknown flow: {flow_id!r}")
        return flow

    def is_trigger(self, flow_id: FlowId, text: str) -> bool:
        """True if ``text`` contains one of the flow's trigger phrases."""
        normalized = normalize_text(text)
        return any(
            normalize_text(keyword) in normalized
            for keyword in self.get_flow(flow_id).trigger_keywords
        )

    def begin(self, flow_id: FlowId, turn: TurnContext) -> None:
        """Start a flow: run its first step, which asks the first question."""
        flow = self.get_flow(flow_id)
        if flow_id is FlowId.RESERVATION:
            turn.state.reservation = RoomReservation()
        log.info("Flow %s started for %s", flow_id.value, turn.conversation_key)
        self._run_step(flow, 0, None, turn)

    def resume(self, text: str, turn: TurnContext) -> None:
        """Feed the reply to the pending prompt into the active flow."""
        state = turn.state
        if state.active_flow_id is None:
            raise MalformedStateError("No active flow to resume")

        flow, step = self._pending_step(state)
        validator = get_validator(step.prompt_id)
        try:
            value = validator.parse(text, step.choices)
        except PromptRejected as e:
            log.info(
                "Prompt %s rejected at %s/%s: %s",
                step.prompt_id.value, flow.id.value, step.id, e,
            )
            if step.retry_prompt:
                turn.reply(self.render(step.retry_prompt, turn))
            turn.reply(self.render_prompt(step, turn))
            return

        next_index = state.active_step_index + 1
        if next_index >= len(flow.steps):
            raise MalformedStateError(
                f"Step {step.id} is the last step of {flow.id.value}; nothing to resume"
            )
        self._run_step(flow, next_index, value, turn)

    def current_prompt(self, turn: TurnContext) -> str:
        """Text of the prompt the active flow is waiting on."""
        _, step = self._pending_step(turn.state)
        return self.render_prompt(step, turn)

    def render_prompt(self, step: StepDef, turn: TurnContext) -> str:
        text = self.render(step.prompt, turn)
        if step.prompt_id is PromptId.CHOICE and step.choices:
            text = f"{text} {format_choices(step.choices)}"
        return text

    def render(self, template: str, turn: TurnContext) -> str:
        """Replace {{placeholder}} patterns with conversation values."""
        reservation = turn.state.reservation
        start = reservation.start_date

        replacements = {
            "{{name}}": turn.identity.name or "",
            "{{start_date}}": f"{start:%A, %B} {start.day}, {start.year}" if start else "",
            "{{nights}}": "" if reservation.nights is None else str(reservation.nights),
            "{{stay_days}}": "" if reservation.nights is None else str(reservation.nights + 1),
            "{{occupants}}": "" if reservation.occupants is None else str(reservation.occupants),
            "{{bed_size}}": reservation.bed_size.label if reservation.bed_size else "",
            "{{order_reference}}": reservation.order_reference or "",
        }

        for placeholder, value in replacements.items():
            template = template.replace(placeholder, value)
        return template

    # ── Internal: cursor ──────────────────────────────────────

    def _pending_step(self, state: ConversationState) -> tuple[FlowDef, StepDef]:
        """Look up the step that issued the pending prompt."""
        flow = self.get_flow(state.active_flow_id)
        index = state.active_step_index
        if index >= len(flow.steps):
            raise MalformedStateError(
                f"Step index {index} out of range for flow {flow.id.value}"
            )
        step = flow.steps[index]
        if step.kind is not StepKind.PROMPT or step.prompt_id != state.pending_prompt_id:
            raise MalformedStateError(
                f"Step {step.id} does not expect prompt {state.pending_prompt_id!r}"
            )
        return flow, step

    # ── Internal: step execution ──────────────────────────────

    def _run_step(self, flow: FlowDef, index: int, result: Any, turn: TurnContext) -> None:
        step = flow.steps[index]

        if step.action is not None:
            self._apply_action(step.action, result, turn)

        if step.kind is StepKind.PROMPT:
            turn.reply(self.render_prompt(step, turn))
            turn.state.await_input(flow.id, index, step.prompt_id)
            log.info("Flow %s advance: step %d (%s)", flow.id.value, index, step.id)
            return

        declined = step.action is StepAction.CONFIRM_ORDER and not result
        closing = step.cancel_message if declined else step.message
        turn.state.clear_flow()
        if closing:
            turn.reply(self.render(closing, turn))
        log.info(
            "Flow %s finished at %s%s",
            flow.id.value, step.id, " (declined)" if declined else "",
        )

    def _apply_action(self, action: StepAction, result: Any, turn: TurnContext) -> None:
        """Store the previous step's result in the slot the action names."""
        reservation = turn.state.reservation

        if action is StepAction.STORE_START_DATE:
            reservation.start_date = result
        elif action is StepAction.STORE_STAY_LENGTH:
            # The first night is implied by the check-in date
            reservation.nights = result - 1
        elif action is StepAction.STORE_OCCUPANTS:
            reservation.occupants = result
        elif action is StepAction.STORE_BED_SIZE:
            reservation.bed_size = BedSize.from_label(result)
        elif action is StepAction.CONFIRM_ORDER:
            reservation.confirmed = bool(result)
            if reservation.confirmed:
                reservation.order_reference = self._reference_factory()
                log.info(
                    "Reservation %s confirmed for %s",
                    reservation.order_reference, turn.conversation_key,
                )
        elif action is StepAction.STORE_NAME:
            turn.identity.name = result
            turn.identity_changed = True
            log.info("Name captured for %s: %s", turn.conversation_key, redact_pii(result))
        else:
            raise ValueError(f"Unhandled step action: {action!r}")
