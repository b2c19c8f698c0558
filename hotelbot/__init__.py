"""Conversational hotel room reservation bot.

One question per turn: the conversation state (active flow, step cursor,
pending prompt, reservation slots) is persisted between turns so that each
inbound message is handled by a fresh, stateless invocation.
"""

__version__ = "0.1.0"
