"""StorageBackend ABC: opaque key-value store for state blobs.

The turn router never talks to a backend directly; ``StateStore`` maps
conversation keys onto backend keys and (de)serializes the models.
Implementations must make ``write`` atomic per key: a concurrent reader
sees either the old blob or the new one, never a partial write.
"""

from abc import ABC, abstractmethod


class StorageBackend(ABC):
    """Abstract key-value store holding JSON text blobs."""

    @abstractmethod
    async def read(self, key: str) -> str | None:
        """Return the blob stored under ``key``, or None if absent.

        Raises OSError (or a subclass) if the store cannot be reached.
        """

    @abstractmethod
    async def write(self, key: str, blob: str) -> None:
        """Replace the blob stored under ``key``.

        Raises OSError (or a subclass) if the write fails.
        """
