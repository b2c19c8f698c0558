"""In-process storage backend (state is lost on restart)."""

from __future__ import annotations

import logging

from hotelbot.storage.base import StorageBackend

log = logging.getLogger("hotelbot.storage.memory")


class MemoryStorage(StorageBackend):
    """Dict of immutable strings; a single assignment is atomic per key."""

    def __init__(self) -> None:
        self._blobs: dict[str, str] = {}

    async def read(self, key: str) -> str | None:
        return self._blobs.get(key)

    async def write(self, key: str, blob: str) -> None:
        self._blobs[key] = blob
        log.debug("Stored %s (%d bytes)", key, len(blob))
