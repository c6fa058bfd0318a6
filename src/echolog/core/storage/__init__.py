"""
Storage backends for echolog.

A blob store maps a string key to an opaque byte payload and supports
whole-value overwrite only. ``LocalStorage`` keeps one file per key on
disk; ``MemoryStorage`` keeps everything in a dict.
"""

from .base import (
    BlobStore,
    StorageError,
    StoragePermissionError,
)
from .local import LocalStorage
from .memory import MemoryStorage

__all__ = [
    "BlobStore",
    "LocalStorage",
    "MemoryStorage",
    "StorageError",
    "StoragePermissionError",
]
