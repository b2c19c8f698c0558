"""File storage backend: one JSON file per key.

Keys like ``conversation/abc`` become ``<root>/conversation/abc.json``.
Each segment is percent-encoded, so distinct keys always map to distinct
files ("chat:alice" and "chat/alice" do not collide) and no key can
escape the root directory.
Writes go to a temporary file in the same directory which then replaces
the target with ``os.replace``, so readers never see a partial blob.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from urllib.parse import quote

from hotelbot.storage.base import StorageBackend

log = logging.getLogger("hotelbot.storage.file")


def _safe_segment(segment: str) -> str:
    """Percent-encode a key segment for use as a file name ("a/b" → "a%2Fb")."""
    encoded = quote(segment, safe="")
    # "." and ".." are left alone by quote
    if encoded.strip(".") == "":
        encoded = encoded.replace(".", "%2E")
    return encoded or "%"


class FileStorage(StorageBackend):
    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, key: str) -> Path:
        """Filesystem path for a storage key."""
        namespace, sep, name = key.partition("/")
        if not sep:
            return self._root / f"{_safe_segment(namespace)}.json"
        return self._root / _safe_segment(namespace) / f"{_safe_segment(name)}.json"

    async def read(self, key: str) -> str | None:
        return await asyncio.to_thread(self._read_sync, key)

    async def write(self, key: str, blob: str) -> None:
        await asyncio.to_thread(self._write_sync, key, blob)

    def _read_sync(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def _write_sync(self, key: str, blob: str) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(blob)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        log.debug("Wrote %s (%d bytes)", path, len(blob))
