"""Pydantic model for the user's identity."""

from typing import Optional

from pydantic import BaseModel


class UserIdentity(BaseModel):
    """Who the bot is talking to. ``name`` is set once by name capture."""

    name: Optional[str] = None
