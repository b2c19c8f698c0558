"""StateStore: loads and saves the per-conversation records.

Two logical namespaces share one backend, both keyed by the conversation
key supplied by the transport:

  conversation/<key>   ConversationState (cursor, turn count, reservation)
  user/<key>           UserIdentity

Blobs are ``model_dump_json()`` output, which is deterministic, so loading
and immediately saving an unchanged record writes identical bytes.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ValidationError

from hotelbot.config import Settings, settings
from hotelbot.errors import MalformedStateError, PersistenceError
from hotelbot.models.conversation import ConversationState
from hotelbot.models.user import UserIdentity
from hotelbot.storage.base import StorageBackend
from hotelbot.storage.file import FileStorage
from hotelbot.storage.memory import MemoryStorage

log = logging.getLogger("hotelbot.storage")

CONVERSATION_NAMESPACE = "conversation"
USER_NAMESPACE = "user"


def create_backend(config: Settings | None = None) -> StorageBackend:
    """Build the backend selected by STORAGE_BACKEND."""
    config = config or settings
    if config.storage_backend == "file":
        log.info("Using file storage at %s", config.storage_dir)
        return FileStorage(config.storage_dir)
    return MemoryStorage()


class StateStore:
    def __init__(self, backend: StorageBackend | None = None) -> None:
        self._backend = backend or MemoryStorage()

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    @staticmethod
    def conversation_key(key: str) -> str:
        return f"{CONVERSATION_NAMESPACE}/{key}"

    @staticmethod
    def user_key(key: str) -> str:
        return f"{USER_NAMESPACE}/{key}"

    # ── Conversation state ────────────────────────────────────

    async def load(self, key: str) -> ConversationState:
        """Load a conversation's state, or a fresh default if none exists.

        Raises MalformedStateError if the stored blob does not parse, and
        PersistenceError if the backend fails.
        """
        return await self._load(self.conversation_key(key), ConversationState)

    async def save(self, key: str, state: ConversationState) -> None:
        await self._save(self.conversation_key(key), state)

    # ── User identity ─────────────────────────────────────────

    async def load_identity(self, key: str) -> UserIdentity:
        return await self._load(self.user_key(key), UserIdentity)

    async def save_identity(self, key: str, identity: UserIdentity) -> None:
        await self._save(self.user_key(key), identity)

    # ── Internal ──────────────────────────────────────────────

    async def _load(self, storage_key: str, model: type[BaseModel]):
        try:
            blob = await self._backend.read(storage_key)
        except OSError as e:
            raise PersistenceError(f"Failed to load {storage_key}: {e}") from e

        if blob is None:
            return model()

        try:
            return model.model_validate_json(blob)
        except ValidationError as e:
            raise MalformedStateError(f"Stored {storage_key} does not parse: {e}") from e

    async def _save(self, storage_key: str, record: BaseModel) -> None:
        blob = record.model_dump_json()
        try:
            await self._backend.write(storage_key, blob)
        except OSError as e:
            raise PersistenceError(f"Failed to save {storage_key}: {e}") from e
