"""
Memo service - composes token verification, the ownership guard and the
memo store into the memo operations.

Listing is public and shows every user's memos. Creating requires a valid
session. Viewing for edit, editing and deleting additionally require that
the caller owns the memo. Ownership is checked and the change applied
inside one store transaction, so no other writer can slip in between.
"""

from typing import Optional

from auth.tokens import TokenService
from core.errors import Unauthenticated
from core.logging import get_logger
from core.models import Memo
from core.storage.base import BaseRecordStore
from manager.ownership import AccessDecision, OwnershipGuard, index_of
from manager.pipeline import (
    MemoOutcome,
    OutcomeStatus,
    RequestContext,
    Stage,
    run_pipeline,
)


logger = get_logger(__name__)


class MemoService:
    """
    Memo operations on behalf of a token holder.

    Soft failures (bad token, foreign memo, missing memo) come back as a
    MemoOutcome status. Storage failures propagate as StorageUnavailable.
    """

    def __init__(
        self,
        memos: BaseRecordStore[Memo],
        tokens: TokenService,
        guard: Optional[OwnershipGuard] = None,
    ):
        self.memos = memos
        self.tokens = tokens
        self.guard = guard or OwnershipGuard()

    # =========================================
    # Operations
    # =========================================

    async def list_memos(self, search: Optional[str] = None) -> list[Memo]:
        """All memos, optionally filtered by a case-insensitive substring."""
        memos = await self.memos.load_all()
        if not search:
            return memos
        return [memo for memo in memos if memo.matches(search)]

    async def create_memo(
        self,
        token: Optional[str],
        title: str,
        content: str,
    ) -> MemoOutcome:
        ctx = RequestContext(token=token, payload={"title": title, "content": content})
        return await run_pipeline(ctx, self._authenticate, self._insert)

    async def get_memo_for_edit(
        self,
        token: Optional[str],
        memo_id: str,
    ) -> MemoOutcome:
        ctx = RequestContext(token=token, memo_id=memo_id)
        return await run_pipeline(
            ctx,
            self._authenticate,
            self._load,
            self._authorize,
            self._view,
        )

    async def edit_memo(
        self,
        token: Optional[str],
        memo_id: str,
        title: str,
        content: str,
    ) -> MemoOutcome:
        ctx = RequestContext(
            token=token,
            memo_id=memo_id,
            payload={"title": title, "content": content},
        )
        return await run_pipeline(
            ctx,
            self._authenticate,
            self._in_transaction(self._authorize, self._apply_edit),
        )

    async def delete_memo(
        self,
        token: Optional[str],
        memo_id: str,
    ) -> MemoOutcome:
        ctx = RequestContext(token=token, memo_id=memo_id)
        return await run_pipeline(
            ctx,
            self._authenticate,
            self._in_transaction(self._authorize, self._apply_delete),
        )

    # =========================================
    # Stages
    # =========================================

    async def _authenticate(self, ctx: RequestContext) -> Optional[MemoOutcome]:
        try:
            ctx.user_id = self.tokens.verify(ctx.token)
        except Unauthenticated as e:
            logger.info("Unauthenticated memo request", reason=str(e), memo_id=ctx.memo_id)
            return MemoOutcome(status=OutcomeStatus.UNAUTHENTICATED, message=str(e))
        return None

    async def _load(self, ctx: RequestContext) -> Optional[MemoOutcome]:
        ctx.records = await self.memos.load_all()
        return None

    async def _authorize(self, ctx: RequestContext) -> Optional[MemoOutcome]:
        ctx.index = index_of(ctx.records, ctx.memo_id)
        decision = self.guard.authorize(ctx.target, ctx.user_id)

        if decision is AccessDecision.NOT_FOUND:
            logger.info("Memo not found", memo_id=ctx.memo_id, user_id=ctx.user_id)
            return MemoOutcome(status=OutcomeStatus.NOT_FOUND, message="Memo not found")

        if decision is AccessDecision.OWNER_MISMATCH:
            logger.warning(
                "Memo owner mismatch",
                memo_id=ctx.memo_id,
                user_id=ctx.user_id,
            )
            return MemoOutcome(
                status=OutcomeStatus.OWNER_MISMATCH,
                message="You are not allowed to change this memo",
            )

        return None

    async def _view(self, ctx: RequestContext) -> MemoOutcome:
        return MemoOutcome.success(ctx.target)

    async def _insert(self, ctx: RequestContext) -> MemoOutcome:
        memo = Memo(
            title=ctx.payload["title"],
            content=ctx.payload["content"],
            owner_id=ctx.user_id,
        )
        await self.memos.create(memo)
        logger.info("Memo created", memo_id=memo.id, user_id=ctx.user_id)
        return MemoOutcome.success(memo)

    async def _apply_edit(self, ctx: RequestContext) -> MemoOutcome:
        ctx.records[ctx.index] = ctx.target.model_copy(update=ctx.payload)
        logger.info("Memo updated", memo_id=ctx.memo_id, user_id=ctx.user_id)
        return MemoOutcome.success(ctx.target)

    async def _apply_delete(self, ctx: RequestContext) -> MemoOutcome:
        memo = ctx.records.pop(ctx.index)
        logger.info("Memo deleted", memo_id=ctx.memo_id, user_id=ctx.user_id)
        return MemoOutcome.success(memo)

    def _in_transaction(self, *stages: Stage) -> Stage:
        """Wrap ``stages`` so they run against the collection inside one store transaction."""

        async def stage(ctx: RequestContext) -> MemoOutcome:
            async with self.memos.transaction() as records:
                ctx.records = records
                return await run_pipeline(ctx, *stages)

        return stage
