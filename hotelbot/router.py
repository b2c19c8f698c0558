"""Turn router: the per-request entry point.

Each inbound activity is one turn:

  1. Load ConversationState and UserIdentity for the conversation
  2. Non-message events get an acknowledgement and nothing else
  3. No name yet and no active flow → start name capture
  4. Active flow → resume it with the message
  5. Idle → start the reservation on a trigger phrase, otherwise bump the
     turn count and echo
  6. Save state, then hand the replies back to the transport

State is saved exactly once per turn on the success path.  If a step
blows up, the user gets a single apology, whatever was mutated is saved
best effort, and TurnFailedError is raised.
"""

from __future__ import annotations

import logging
from typing import Callable

from hotelbot.config import Settings, settings
from hotelbot.engine import TurnContext, WaterfallEngine
from hotelbot.errors import MalformedStateError, PersistenceError, TurnFailedError
from hotelbot.models.activity import Activity, TurnResult
from hotelbot.models.conversation import ConversationState, FlowId
from hotelbot.models.user import UserIdentity
from hotelbot.storage.state_store import StateStore

log = logging.getLogger("hotelbot.router")


class TurnRouter:
    def __init__(
        self,
        store: StateStore | None = None,
        engine: WaterfallEngine | None = None,
        config: Settings | None = None,
    ) -> None:
        self._store = store or StateStore()
        self._engine = engine or WaterfallEngine()
        self._config = config or settings

    @property
    def store(self) -> StateStore:
        return self._store

    @property
    def engine(self) -> WaterfallEngine:
        return self._engine

    # ── Public API ────────────────────────────────────────────

    async def on_turn(self, activity: Activity) -> TurnResult:
        """Process one inbound activity and return the replies to send."""
        turn = await self._load(activity.conversation_key)
        await self._run(turn, lambda: self._route(activity, turn))
        return TurnResult(conversation_key=turn.conversation_key, replies=turn.replies)

    async def start_reservation(self, conversation_key: str) -> TurnResult:
        """Start the reservation waterfall for a conversation.

        If a flow is already running it is left alone and its pending
        question is asked again.
        """
        turn = await self._load(conversation_key)

        def start() -> None:
            if turn.state.is_idle:
                self._engine.begin(FlowId.RESERVATION, turn)
            else:
                turn.reply(self._engine.current_prompt(turn))

        await self._run(turn, start)
        return TurnResult(conversation_key=turn.conversation_key, replies=turn.replies)

    # ── Internal: routing ─────────────────────────────────────

    def _route(self, activity: Activity, turn: TurnContext) -> None:
        state, identity = turn.state, turn.identity

        if not activity.is_user_message:
            turn.reply(f"{activity.type} event detected")
            return

        if not identity.name and state.is_idle:
            self._engine.begin(FlowId.NAME_CAPTURE, turn)
            return

        if not state.is_idle:
            self._engine.resume(activity.text, turn)
            return

        if self._engine.is_trigger(FlowId.RESERVATION, activity.text):
            self._engine.begin(FlowId.RESERVATION, turn)
            return

        state.turn_count += 1
        turn.reply(
            f"Name: {identity.name} Turn {state.turn_count}: You sent '{activity.text}'"
        )

    async def _run(self, turn: TurnContext, handler: Callable[[], None]) -> None:
        """Run ``handler`` for the turn, then commit.

        A cursor that cannot be resumed resets the conversation to Idle and
        the handler runs once more against the clean state.
        """
        try:
            try:
                handler()
            except MalformedStateError as e:
                log.warning("Resetting %s after malformed state: %s", turn.conversation_key, e)
                turn.state.reset()
                turn.replies.clear()
                handler()
        except Exception as e:
            log.exception("Turn failed for %s", turn.conversation_key)
            turn.replies = [self._config.apology_message]
            try:
                await self._commit(turn)
            except PersistenceError:
                log.error("Best-effort save failed for %s", turn.conversation_key)
            raise TurnFailedError(str(e), replies=turn.replies) from e

        await self._commit(turn)

    # ── Internal: persistence ─────────────────────────────────

    async def _load(self, key: str) -> TurnContext:
        try:
            state = await self._store.load(key)
        except MalformedStateError as e:
            log.warning("Discarding unreadable state for %s: %s", key, e)
            state = ConversationState()

        if not state.is_consistent():
            log.warning(
                "Resetting %s: flow=%s prompt=%s",
                key, state.active_flow_id, state.pending_prompt_id,
            )
            state.reset()

        try:
            identity = await self._store.load_identity(key)
        except MalformedStateError as e:
            log.warning("Discarding unreadable identity for %s: %s", key, e)
            identity = UserIdentity()

        return TurnContext(conversation_key=key, state=state, identity=identity)

    async def _commit(self, turn: TurnContext) -> None:
        if turn.identity_changed:
            await self._store.save_identity(turn.conversation_key, turn.identity)
        await self._store.save(turn.conversation_key, turn.state)
