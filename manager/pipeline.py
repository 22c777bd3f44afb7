"""
Request pipeline for memo operations.

An operation is an ordered list of stages (authenticate, authorize,
execute). Each stage is an async function over a shared RequestContext.
A stage returns None to pass control to the next stage, or a MemoOutcome
to stop the pipeline with that result.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from core.models import Memo


class OutcomeStatus(str, Enum):
    """How a memo operation ended."""
    OK = "ok"
    UNAUTHENTICATED = "unauthenticated"  # No or invalid session token
    OWNER_MISMATCH = "owner_mismatch"    # Record belongs to someone else
    NOT_FOUND = "not_found"              # No record with that id


@dataclass
class MemoOutcome:
    """Result handed back to the presentation layer."""
    status: OutcomeStatus
    memo: Optional[Memo] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.OK

    @classmethod
    def success(cls, memo: Optional[Memo] = None) -> "MemoOutcome":
        return cls(status=OutcomeStatus.OK, memo=memo)


@dataclass
class RequestContext:
    """
    State threaded through the stages of one operation.

    Inputs are set by the caller; the rest is filled in by stages.
    """
    # Inputs
    token: Optional[str] = None
    memo_id: Optional[str] = None
    payload: dict[str, Any] = field(default_factory=dict)

    # Filled in by stages
    user_id: Optional[str] = None
    records: Optional[list[Memo]] = None
    index: Optional[int] = None

    @property
    def target(self) -> Optional[Memo]:
        """The record located by the authorize stage."""
        if self.records is None or self.index is None:
            return None
        return self.records[self.index]


Stage = Callable[[RequestContext], Awaitable[Optional[MemoOutcome]]]


async def run_pipeline(ctx: RequestContext, *stages: Stage) -> MemoOutcome:
    """Run ``stages`` in order until one of them produces an outcome."""
    for stage in stages:
        outcome = await stage(ctx)
        if outcome is not None:
            return outcome
    raise RuntimeError("Pipeline finished without producing an outcome")
