"""Data models for the reservation bot."""

from .activity import Activity, ActivityType, TurnResult
from .conversation import ConversationState, FlowId, PromptId
from .reservation import BedSize, RoomReservation
from .user import UserIdentity

__all__ = [
    "Activity",
    "ActivityType",
    "BedSize",
    "ConversationState",
    "FlowId",
    "PromptId",
    "RoomReservation",
    "TurnResult",
    "UserIdentity",
]
