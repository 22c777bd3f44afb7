"""
JSON file storage backend.

Each collection is a single JSON array on disk, rewritten in full on every
mutation. Writes go to a temporary sibling file that is then renamed over
the original, so a reader sees either the old or the new collection and
never a partial one.

Read-modify-write cycles are serialized by an asyncio lock keyed on the
running event loop and the resolved file path. All stores on one loop that
point at the same file share that lock. Separate processes are not
coordinated.
"""

import asyncio
import json
import os
import tempfile
import weakref
from pathlib import Path
from typing import Any, Union

from core.errors import StorageUnavailable
from core.logging import get_logger
from core.storage.base import BaseRecordStore, RecordT
from core.storage.bootstrap import ensure_exists


logger = get_logger(__name__)


# event loop -> {resolved path: lock}
_path_locks: weakref.WeakKeyDictionary = weakref.WeakKeyDictionary()


def lock_for_path(path: Path) -> asyncio.Lock:
    """
    Get the lock guarding one collection file on the running event loop.

    An asyncio lock can only be awaited from one loop, so each loop gets its
    own set. Must be called from a coroutine.
    """
    locks = _path_locks.setdefault(asyncio.get_running_loop(), {})
    resolved = path.resolve()
    lock = locks.get(resolved)
    if lock is None:
        lock = locks[resolved] = asyncio.Lock()
    return lock


class JsonFileRecordStore(BaseRecordStore[RecordT]):
    """
    File-backed collection of records.

    The file is created empty by ``setup()``. Until then, reads fail with
    StorageUnavailable.
    """

    def __init__(self, path: Union[str, Path], record_type: type[RecordT]):
        """
        Initialize the file store.

        Args:
            path: Location of the JSON collection file
            record_type: Record model the rows are parsed into
        """
        self.path = Path(path)
        super().__init__(record_type, name=self.path.name)

    async def setup(self) -> None:
        """Bootstrap the collection file if it is missing."""
        await asyncio.to_thread(ensure_exists, self.path)
        logger.info(
            "File record store initialized",
            path=str(self.path),
            record_type=self.record_type.__name__,
        )

    def _collection_lock(self) -> asyncio.Lock:
        return lock_for_path(self.path)

    async def _read(self) -> Any:
        return await asyncio.to_thread(self._read_file)

    async def _write(self, rows: list[dict[str, Any]]) -> None:
        await asyncio.to_thread(self._write_file, rows)
        logger.debug(
            "Collection written",
            path=str(self.path),
            records=len(rows),
        )

    def _read_file(self) -> Any:
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except (OSError, ValueError) as e:
            # ValueError covers both invalid JSON and invalid UTF-8
            logger.error(
                "Failed to read collection",
                path=str(self.path),
                error=str(e),
            )
            raise StorageUnavailable(f"Cannot read {self.path}: {e}") from e

    def _write_file(self, rows: list[dict[str, Any]]) -> None:
        payload = json.dumps(rows, indent=2, ensure_ascii=False)
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            )
        except OSError as e:
            raise StorageUnavailable(f"Cannot write {self.path}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error(
                "Failed to write collection",
                path=str(self.path),
                error=str(e),
            )
            raise StorageUnavailable(f"Cannot write {self.path}: {e}") from e
