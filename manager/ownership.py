"""
Ownership guard for memo mutations.

Decides whether an authenticated user may change a record. The three
outcomes are kept apart: an absent record, a record owned by someone else,
and a record the caller owns.
"""

from enum import Enum
from typing import Optional, Sequence

from core.models import Memo
from core.storage.base import BaseRecordStore, Record


class AccessDecision(str, Enum):
    """Result of an ownership check."""
    ALLOW = "allow"
    OWNER_MISMATCH = "owner_mismatch"
    NOT_FOUND = "not_found"


def index_of(records: Sequence[Record], record_id: Optional[str]) -> Optional[int]:
    """Position of the record with ``record_id`` in a loaded collection, or None."""
    for index, record in enumerate(records):
        if record.id == record_id:
            return index
    return None


class OwnershipGuard:
    """
    Compares a record's owner with the acting user.

    Usage:
        guard = OwnershipGuard()
        decision = guard.authorize(memo, user_id)
        if decision is AccessDecision.ALLOW:
            ...
    """

    def authorize(self, record: Optional[Memo], user_id: str) -> AccessDecision:
        if record is None:
            return AccessDecision.NOT_FOUND
        if record.owner_id != user_id:
            return AccessDecision.OWNER_MISMATCH
        return AccessDecision.ALLOW

    async def check(
        self,
        store: BaseRecordStore[Memo],
        record_id: str,
        user_id: str,
    ) -> AccessDecision:
        """Load the record with ``record_id`` from ``store`` and authorize it."""
        return self.authorize(await store.get(record_id), user_id)
