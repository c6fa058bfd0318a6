"""In-process blob store. Nothing survives the interpreter."""

from .base import BlobStore, StoragePermissionError


class MemoryStorage(BlobStore):
    """Dict-backed storage backend."""

    def __init__(self, initial: dict[str, bytes] | None = None, **config):
        super().__init__(**config)
        self._blobs: dict[str, bytes] = dict(initial or {})

    async def get(self, key: str) -> bytes | None:
        return self._blobs.get(key)

    async def put(self, key: str, data: bytes) -> None:
        if not key.strip():
            raise StoragePermissionError("Storage key cannot be empty.")
        self._blobs[key] = bytes(data)
