"""
Abstract base class for blob storage backends.

The contract is deliberately small: read a key, overwrite a key. There is
no transactionality beyond a single-key overwrite, so callers that need a
consistent multi-record view store the whole collection under one key.
"""

from abc import ABC, abstractmethod

from ..exceptions import EchologError


class BlobStore(ABC):
    """Abstract base class for key-value blob stores."""

    def __init__(self, **config):
        self.config = config

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Return the bytes stored at *key*, or None if the key is absent."""

    @abstractmethod
    async def put(self, key: str, data: bytes) -> None:
        """Overwrite *key* with *data*. Raises StorageError on failure."""


class StorageError(EchologError):
    """Base exception for storage errors."""


class StoragePermissionError(StorageError):
    """Raised when storage operation is not permitted."""
