"""
Value-table storage backends.
"""

from .storage_manager import (
    FileStorageManager,
    JsonStorageManager,
    MemoryStorageManager,
    PickleStorageManager,
    StorageManager,
)
