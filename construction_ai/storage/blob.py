"""Blob storage for uploaded files."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from construction_ai.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StoredObject:
    key: str
    url: str


class LocalBlobStore:
    """Filesystem-backed blob store returning ``file://`` URLs."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def _path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if not path.is_relative_to(self.root):
            raise ValueError(f"Blob key escapes storage root: {key}")
        return path

    async def put(self, key: str, data: bytes, content_type: str) -> StoredObject:
        """Write bytes to disk under ``key``."""
        path = self._path_for(key)

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)

        await asyncio.to_thread(_write)
        logger.debug("blob_stored", key=key, size=len(data), content_type=content_type)
        return StoredObject(key=key, url=path.as_uri())

    async def get(self, key: str) -> bytes:
        """Read bytes stored under ``key``."""
        return await asyncio.to_thread(self._path_for(key).read_bytes)
