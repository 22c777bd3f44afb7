"""
Memo request and response schemas.

These Pydantic models define the API contract and provide
automatic validation and documentation.
"""

from typing import Optional

from pydantic import BaseModel, Field

from core.models import Memo


class MemoWriteRequest(BaseModel):
    """Request body for creating or editing a memo."""

    title: str = Field(
        ...,
        description="Memo title",
        examples=["Groceries"],
    )
    content: str = Field(
        default="",
        description="Memo body",
        examples=["milk, eggs, coffee"],
    )


class MemoResponse(BaseModel):
    """A single memo."""

    id: str = Field(..., description="Memo identifier")
    title: str
    content: str
    owner_id: str = Field(..., description="Id of the user who owns the memo")

    @classmethod
    def from_memo(cls, memo: Memo) -> "MemoResponse":
        return cls(
            id=memo.id,
            title=memo.title,
            content=memo.content,
            owner_id=memo.owner_id,
        )


class MemoListResponse(BaseModel):
    """All memos, optionally filtered by a search query."""

    memos: list[MemoResponse] = Field(default_factory=list)
    total: int = Field(..., description="Number of memos returned")
    search: Optional[str] = Field(
        default=None,
        description="Search query the list was filtered by",
    )
    auth_error: bool = Field(
        default=False,
        description="Set when the client was redirected here after an ownership failure",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "memos": [
                        {
                            "id": "6f1c1d1e-3b7a-4a43-9d8e-0a6c2f6c9b11",
                            "title": "Groceries",
                            "content": "milk, eggs, coffee",
                            "owner_id": "0b8e7d4c-51a2-4f0e-8d55-2f3c1e9a7b60",
                        }
                    ],
                    "total": 1,
                    "search": None,
                    "auth_error": False,
                }
            ]
        }
    }
