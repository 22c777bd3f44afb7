"""
Abstract base classes for record storage.

This module defines the contract that all collection backends must follow.
A collection is an ordered list of records that is always loaded wholesale,
transformed in memory and written back wholesale. Backends only have to
provide raw read and write of the serialized list; locking, validation and
the CRUD helpers live here so every backend behaves the same.
"""

import asyncio
import uuid
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.errors import DuplicateRecordId, StorageUnavailable


def new_record_id() -> str:
    return str(uuid.uuid4())


class Record(BaseModel):
    """
    Base model for anything stored in a collection.

    Unknown keys found on disk are kept and written back unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(default_factory=new_record_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the on-disk dictionary form."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        """Create from the on-disk dictionary form."""
        return cls.model_validate(data)


RecordT = TypeVar("RecordT", bound=Record)


class BaseRecordStore(ABC, Generic[RecordT]):
    """
    Abstract base class for a single collection of records.

    Every mutation runs as load -> transform -> save inside
    ``transaction()``, which holds this store's lock for the whole cycle.
    Two stores that share a lock never interleave their cycles.

    Usage:
        store = JsonFileRecordStore(path, Memo)
        await store.setup()

        memo = await store.create(Memo(title="t", content="c", owner_id=uid))

        async with store.transaction() as memos:
            memos.reverse()
    """

    def __init__(
        self,
        record_type: type[RecordT],
        name: str,
    ):
        self.record_type = record_type
        self.name = name
        self._lock: Optional[asyncio.Lock] = None

    @abstractmethod
    async def setup(self) -> None:
        """
        Initialize the backend (create the empty collection).

        This should be idempotent - safe to call multiple times.
        """
        pass

    @abstractmethod
    async def _read(self) -> Any:
        """Return the raw deserialized collection."""
        pass

    @abstractmethod
    async def _write(self, rows: list[dict[str, Any]]) -> None:
        """Replace the whole collection. Must be atomic for readers."""
        pass

    async def close(self) -> None:
        """Clean up resources."""
        pass

    def _collection_lock(self) -> asyncio.Lock:
        """Lock serializing this store's read-modify-write cycles."""
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    # =========================================
    # Whole-collection access
    # =========================================

    async def load_all(self) -> list[RecordT]:
        """
        Read the entire collection.

        Raises:
            StorageUnavailable: If the data cannot be read or does not
                describe a list of valid records.
        """
        return self._parse(await self._read())

    async def save_all(self, records: list[RecordT]) -> None:
        """Overwrite the entire collection with ``records``."""
        rows = self._dump(records)
        async with self._collection_lock():
            await self._write(rows)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[list[RecordT]]:
        """
        Load the collection under the lock and yield it for in-place changes.

        The list is written back on normal exit if its serialized content
        changed. Nothing is written if the block raises.
        """
        async with self._collection_lock():
            records = self._parse(await self._read())
            before = self._dump(records)
            yield records
            after = self._dump(records)
            if after != before:
                await self._write(after)

    # =========================================
    # Record helpers
    # =========================================

    async def get(self, record_id: str) -> Optional[RecordT]:
        for record in await self.load_all():
            if record.id == record_id:
                return record
        return None

    async def create(self, record: RecordT) -> RecordT:
        """
        Append a record to the end of the collection.

        Raises:
            DuplicateRecordId: If a record with the same id exists.
        """
        async with self.transaction() as records:
            if any(existing.id == record.id for existing in records):
                raise DuplicateRecordId(record.id)
            records.append(record)
        return record

    async def update(self, record_id: str, **changes: Any) -> Optional[RecordT]:
        """
        Merge ``changes`` into the record with ``record_id``.

        Returns the updated record, or None if there is no such record.
        """
        async with self.transaction() as records:
            for index, record in enumerate(records):
                if record.id == record_id:
                    records[index] = record.model_copy(update=changes)
                    return records[index]
        return None

    async def delete(self, record_id: str) -> Optional[RecordT]:
        """Remove the record with ``record_id`` and return it, or None if absent."""
        async with self.transaction() as records:
            for index, record in enumerate(records):
                if record.id == record_id:
                    return records.pop(index)
        return None

    # =========================================
    # Serialization
    # =========================================

    def _parse(self, rows: Any) -> list[RecordT]:
        if not isinstance(rows, list):
            raise StorageUnavailable(
                f"Collection {self.name} is not a list of records"
            )
        try:
            records = [self.record_type.from_dict(row) for row in rows]
        except ValidationError as e:
            raise StorageUnavailable(
                f"Collection {self.name} holds an invalid record: {e}"
            ) from e

        seen: set[str] = set()
        for record in records:
            if record.id in seen:
                raise StorageUnavailable(
                    f"Collection {self.name} holds duplicate id {record.id}"
                )
            seen.add(record.id)
        return records

    def _dump(self, records: list[RecordT]) -> list[dict[str, Any]]:
        seen: set[str] = set()
        rows = []
        for record in records:
            if record.id in seen:
                raise DuplicateRecordId(record.id)
            seen.add(record.id)
            rows.append(record.to_dict())
        return rows
