"""Key-value persistence for conversation and identity state."""

from .base import StorageBackend
from .file import FileStorage
from .memory import MemoryStorage
from .state_store import StateStore, create_backend

__all__ = ["FileStorage", "MemoryStorage", "StateStore", "StorageBackend", "create_backend"]
