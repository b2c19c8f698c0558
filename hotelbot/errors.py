"""Exceptions raised while processing a turn."""

from __future__ import annotations


class HotelBotError(Exception):
    """Base class for turn-level failures."""


class PromptRejected(ValueError):
    """User input did not parse for the pending prompt.

    Handled inside the flow engine by re-issuing the same prompt; never
    surfaces as a turn failure.
    """


class PersistenceError(HotelBotError):
    """Loading or saving state failed. The turn was not committed and the
    caller may retry it."""


class MalformedStateError(HotelBotError):
    """Persisted state cannot be resumed (corrupt blob or broken cursor)."""


class TurnFailedError(HotelBotError):
    """A flow step failed unexpectedly.

    State was saved best effort; ``replies`` holds what the user should see
    (the apology message).
    """

    def __init__(self, message: str, replies: list[str] | None = None) -> None:
        super().__init__(message)
        self.replies = list(replies or [])
