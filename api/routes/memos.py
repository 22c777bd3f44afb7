"""
Memo endpoints.

- GET /memos - List memos, optionally filtered by ``search``
- GET /memos/add - Describe the creation form
- POST /memos/add - Create a memo owned by the caller
- GET /memos/edit/{memo_id} - Memo as an edit form (owner only)
- POST /memos/edit/{memo_id} - Edit a memo (owner only)
- POST /memos/delete/{memo_id} - Delete a memo (owner only)

Ownership failures redirect to ``/memos?authError=true``. Bodies may be
browser form posts or JSON.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.dependencies import get_memo_body, get_memo_service, get_session_token
from api.schemas.memo import MemoListResponse, MemoResponse, MemoWriteRequest
from api.schemas.user import FormResponse
from core.errors import Unauthenticated
from core.logging import get_logger
from core.models import Memo
from manager.memo_service import MemoService
from manager.pipeline import MemoOutcome, OutcomeStatus


logger = get_logger(__name__)
router = APIRouter(prefix="/memos", tags=["Memos"])

MEMO_FIELDS = ["title", "content"]


class AuthErrorRedirect(Exception):
    """Raised to send the client back to the memo list with ``authError=true``."""

    location = "/memos?authError=true"


def _unwrap(outcome: MemoOutcome) -> Memo:
    """Return the memo of a successful outcome, or raise the matching HTTP failure."""
    if outcome.status == OutcomeStatus.OK:
        return outcome.memo

    if outcome.status == OutcomeStatus.UNAUTHENTICATED:
        raise HTTPException(status_code=403, detail=Unauthenticated.message)

    if outcome.status == OutcomeStatus.OWNER_MISMATCH:
        raise AuthErrorRedirect()

    raise HTTPException(status_code=404, detail=outcome.message)


@router.get("", response_model=MemoListResponse)
async def list_memos(
    search: Optional[str] = Query(default=None, description="Filter on title or content"),
    auth_error: bool = Query(default=False, alias="authError"),
    memo_service: MemoService = Depends(get_memo_service),
) -> MemoListResponse:
    """
    List all memos.

    Every user's memos are listed; only changes are restricted to owners.
    """
    memos = await memo_service.list_memos(search)
    return MemoListResponse(
        memos=[MemoResponse.from_memo(memo) for memo in memos],
        total=len(memos),
        search=search or None,
        auth_error=auth_error,
    )


@router.get("/add", response_model=FormResponse)
async def add_memo_form() -> FormResponse:
    return FormResponse(form="memo_add", fields=MEMO_FIELDS)


@router.post("/add", response_model=MemoResponse, status_code=201)
async def create_memo(
    body: MemoWriteRequest = Depends(get_memo_body),
    token: Optional[str] = Depends(get_session_token),
    memo_service: MemoService = Depends(get_memo_service),
) -> MemoResponse:
    """Create a memo owned by the authenticated caller."""
    outcome = await memo_service.create_memo(token, body.title, body.content)
    return MemoResponse.from_memo(_unwrap(outcome))


@router.get("/edit/{memo_id}", response_model=FormResponse)
async def edit_memo_form(
    memo_id: str,
    token: Optional[str] = Depends(get_session_token),
    memo_service: MemoService = Depends(get_memo_service),
) -> FormResponse:
    outcome = await memo_service.get_memo_for_edit(token, memo_id)
    memo = _unwrap(outcome)
    return FormResponse(
        form="memo_edit",
        fields=MEMO_FIELDS,
        memo=MemoResponse.from_memo(memo),
    )


@router.post("/edit/{memo_id}", response_model=MemoResponse)
async def edit_memo(
    memo_id: str,
    body: MemoWriteRequest = Depends(get_memo_body),
    token: Optional[str] = Depends(get_session_token),
    memo_service: MemoService = Depends(get_memo_service),
) -> MemoResponse:
    outcome = await memo_service.edit_memo(
        token,
        memo_id,
        body.title,
        body.content,
    )
    return MemoResponse.from_memo(_unwrap(outcome))


@router.post("/delete/{memo_id}", response_model=MemoResponse)
async def delete_memo(
    memo_id: str,
    token: Optional[str] = Depends(get_session_token),
    memo_service: MemoService = Depends(get_memo_service),
) -> MemoResponse:
    """Delete a memo and return what was removed."""
    outcome = await memo_service.delete_memo(token, memo_id)
    return MemoResponse.from_memo(_unwrap(outcome))
