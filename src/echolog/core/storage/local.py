"""
Local filesystem storage backend.

One file per key under ``base_path``. Writes go to a sibling temp file
that is then renamed over the target, so a reader never sees a
half-written value.
"""

import os
import uuid
from pathlib import Path

import aiofiles
import aiofiles.os
from loguru import logger

from .base import BlobStore, StorageError, StoragePermissionError


class LocalStorage(BlobStore):
    """Local filesystem storage backend."""

    def __init__(self, base_path: str = "~/.echolog-data/storage", **config):
        super().__init__(**config)
        self.base_path = Path(base_path).expanduser().resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, key: str) -> Path:
        """Resolve a storage key to an absolute path under ``base_path``.

        Rejects unsafe keys (absolute paths, traversal, empty keys, and
        backslash-delimited paths) to prevent writes outside ``base_path``.
        """
        raw_key = key.strip()
        if not raw_key:
            raise StoragePermissionError("Storage key cannot be empty.")
        if "\x00" in raw_key:
            raise StoragePermissionError("Storage key cannot contain null bytes.")
        if "\\" in raw_key:
            raise StoragePermissionError("Storage key cannot contain backslashes. Use '/' separators.")

        key_path = Path(raw_key)
        if key_path.is_absolute() or raw_key.startswith("~"):
            raise StoragePermissionError(f"Unsafe storage key '{key}': absolute paths are not allowed.")

        full_path = (self.base_path / key_path).resolve()
        try:
            full_path.relative_to(self.base_path)
        except ValueError as e:
            raise StoragePermissionError(f"Unsafe storage key '{key}': path traversal is not allowed.") from e
        if full_path == self.base_path:
            raise StoragePermissionError(f"Unsafe storage key '{key}': resolves to the storage root.")
        return full_path

    async def get(self, key: str) -> bytes | None:
        path = self._get_full_path(key)
        if not path.is_file():
            return None

        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot read {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    async def put(self, key: str, data: bytes) -> None:
        path = self._get_full_path(key)
        tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(data)
                await f.flush()
                os.fsync(f.fileno())
            await aiofiles.os.replace(tmp_path, path)
        except PermissionError as e:
            await self._discard(tmp_path)
            raise StoragePermissionError(f"Cannot write to {path}: {e}") from e
        except OSError as e:
            await self._discard(tmp_path)
            raise StorageError(f"Cannot write to {path}: {e}") from e

        logger.debug(f"Wrote {len(data)} bytes to {path}")

    @staticmethod
    async def _discard(path: Path) -> None:
        try:
            if path.exists():
                await aiofiles.os.remove(path)
        except OSError as e:
            logger.warning(f"Could not remove temp file {path}: {e}")
