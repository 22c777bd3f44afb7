"""
Storage abstraction layer.

Provides pluggable backends for whole-collection record storage:
every mutation loads the full collection, changes it in memory and
writes it back.

Supported backends:
- JSON file (default)
- In-memory (tests, throwaway deployments)
"""

from core.storage.base import (
    BaseRecordStore,
    Record,
    new_record_id,
)
from core.storage.bootstrap import ensure_exists
from core.storage.factory import (
    create_memo_store,
    create_user_store,
    get_storage_backend,
    StorageBackend,
)
from core.storage.file import JsonFileRecordStore
from core.storage.memory import InMemoryRecordStore

__all__ = [
    # Abstract interfaces
    "BaseRecordStore",
    "Record",
    "new_record_id",
    # Backends
    "JsonFileRecordStore",
    "InMemoryRecordStore",
    "ensure_exists",
    # Factory functions
    "create_memo_store",
    "create_user_store",
    "get_storage_backend",
    "StorageBackend",
]
