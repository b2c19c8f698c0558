"""Inbound activities and outbound turn results."""

from pydantic import BaseModel, Field


class ActivityType:
    MESSAGE = "message"
    CONVERSATION_UPDATE = "conversationUpdate"
    TYPING = "typing"


class Activity(BaseModel):
    """One inbound event from the transport."""

    conversation_key: str
    type: str = ActivityType.MESSAGE
    text: str = ""

    @property
    def is_user_message(self) -> bool:
        """Only message activities with text take part in flows."""
        return self.type == ActivityType.MESSAGE and bool(self.text.strip())


class TurnResult(BaseModel):
    """Plain-text replies emitted during one turn, in order."""

    conversation_key: str
    replies: list[str] = Field(default_factory=list)
