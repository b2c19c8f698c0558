"""Tests for the slot and conversation state models."""

from datetime import date

import pytest

from hotelbot.models import (
    Activity,
    ActivityType,
    BedSize,
    ConversationState,
    FlowId,
    PromptId,
    RoomReservation,
    UserIdentity,
)


class TestRoomReservation:
    def test_defaults_are_empty(self):
        reservation = RoomReservation()
        assert reservation.start_date is None
        assert reservation.nights is None
        assert reservation.occupants is None
        assert reservation.bed_size is None
        assert reservation.confirmed is None
        assert reservation.is_complete is False

    def test_complete_after_confirmation_either_way(self):
        assert RoomReservation(confirmed=False).is_complete is True
        assert RoomReservation(confirmed=True).is_complete is True


class TestBedSize:
    def test_labels(self):
        assert BedSize.SINGLE.label == "single bed"
        assert BedSize.DOUBLE.label == "double bed"

    def test_from_label(self):
        assert BedSize.from_label("Double Bed") is BedSize.DOUBLE

    def test_from_unknown_label(self):
        with pytest.raises(ValueError):
            BedSize.from_label("king bed")


class TestConversationState:
    def test_fresh_state_is_idle_and_consistent(self):
        state = ConversationState()
        assert state.turn_count == 0
        assert state.is_idle
        assert state.is_consistent()

    def test_await_input_sets_cursor(self):
        state = ConversationState()
        state.await_input(FlowId.RESERVATION, 2, PromptId.NUMBER)
        assert state.active_flow_id is FlowId.RESERVATION
        assert state.active_step_index == 2
        assert state.pending_prompt_id is PromptId.NUMBER
        assert state.is_consistent()

    def test_flow_without_prompt_is_inconsistent(self):
        state = ConversationState(active_flow_id=FlowId.RESERVATION)
        assert not state.is_consistent()

    def test_prompt_without_flow_is_inconsistent(self):
        state = ConversationState(pending_prompt_id=PromptId.DATE)
        assert not state.is_consistent()

    def test_clear_flow_keeps_reservation(self):
        state = ConversationState()
        state.await_input(FlowId.RESERVATION, 4, PromptId.CONFIRM)
        state.reservation.occupants = 2
        state.clear_flow()
        assert state.is_idle
        assert state.active_step_index == 0
        assert state.pending_prompt_id is None
        assert state.reservation.occupants == 2

    def test_reset_drops_reservation_keeps_turn_count(self):
        state = ConversationState(turn_count=5)
        state.await_input(FlowId.RESERVATION, 1, PromptId.NUMBER)
        state.reservation.start_date = date(2026, 12, 24)
        state.reset()
        assert state.is_idle
        assert state.turn_count == 5
        assert state.reservation == RoomReservation()

    def test_negative_turn_count_rejected(self):
        with pytest.raises(ValueError):
            ConversationState(turn_count=-1)


class TestActivity:
    def test_message_with_text_is_user_message(self):
        activity = Activity(conversation_key="c1", text="hi")
        assert activity.type == ActivityType.MESSAGE
        assert activity.is_user_message

    def test_blank_message_is_not_user_message(self):
        assert not Activity(conversation_key="c1", text="   ").is_user_message

    def test_other_type_is_not_user_message(self):
        activity = Activity(conversation_key="c1", type=ActivityType.TYPING, text="hi")
        assert not activity.is_user_message


class TestUserIdentity:
    def test_starts_without_name(self):
        assert UserIdentity().name is None
