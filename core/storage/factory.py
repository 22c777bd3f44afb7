"""
Storage factory for creating record store instances.

This module provides factory functions to create the appropriate
storage implementations based on configuration.
"""

from enum import Enum
from typing import TYPE_CHECKING

from core.logging import get_logger
from core.storage.base import BaseRecordStore


if TYPE_CHECKING:
    from core.config import Settings
    from core.models import Memo, User


logger = get_logger(__name__)


class StorageBackend(str, Enum):
    """Supported storage backends."""
    FILE = "file"
    MEMORY = "memory"


def get_storage_backend(settings: "Settings") -> StorageBackend:
    """
    Determine which storage backend to use based on settings.

    Args:
        settings: Application settings

    Returns:
        The configured storage backend
    """
    backend_str = settings.storage_backend.lower()

    try:
        return StorageBackend(backend_str)
    except ValueError:
        raise ValueError(
            f"Unsupported storage backend: {backend_str}. "
            f"Supported backends: {[b.value for b in StorageBackend]}"
        )


def _create_store(settings: "Settings", path, record_type) -> BaseRecordStore:
    backend = get_storage_backend(settings)

    if backend == StorageBackend.FILE:
        from core.storage.file import JsonFileRecordStore

        logger.info(
            "Creating file record store",
            path=str(path),
            record_type=record_type.__name__,
        )
        return JsonFileRecordStore(path, record_type)

    elif backend == StorageBackend.MEMORY:
        from core.storage.memory import InMemoryRecordStore

        logger.info(
            "Creating in-memory record store",
            record_type=record_type.__name__,
        )
        return InMemoryRecordStore(record_type, name=path.name)

    else:
        raise ValueError(f"Unsupported backend: {backend}")


def create_user_store(settings: "Settings") -> "BaseRecordStore[User]":
    """
    Create the users collection store based on settings.

    Returns:
        Configured store instance (not yet set up)
    """
    from core.models import User

    return _create_store(settings, settings.users_path, User)


def create_memo_store(settings: "Settings") -> "BaseRecordStore[Memo]":
    """
    Create the memos collection store based on settings.

    Returns:
        Configured store instance (not yet set up)
    """
    from core.models import Memo

    return _create_store(settings, settings.memos_path, Memo)
