"""
In-memory storage backend.

Keeps the serialized collection in a plain list. Used by tests and for
throwaway deployments where nothing has to survive a restart.
"""

import copy
from typing import Any, Optional

from core.storage.base import BaseRecordStore, RecordT


class InMemoryRecordStore(BaseRecordStore[RecordT]):
    """Collection held in process memory. Lost on shutdown."""

    def __init__(
        self,
        record_type: type[RecordT],
        name: str = "memory",
        initial: Optional[list[dict[str, Any]]] = None,
    ):
        super().__init__(record_type, name=name)
        self._rows: list[dict[str, Any]] = copy.deepcopy(initial or [])

    async def setup(self) -> None:
        pass

    async def _read(self) -> Any:
        # Stored rows only change through _write
        return copy.deepcopy(self._rows)

    async def _write(self, rows: list[dict[str, Any]]) -> None:
        self._rows = copy.deepcopy(rows)
