"""
User and form schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field

from api.schemas.memo import MemoResponse


class CredentialsRequest(BaseModel):
    """Request body for login and registration."""

    username: str = Field(
        ...,
        min_length=1,
        description="Case-sensitive login name",
        examples=["alice"],
    )
    password: str = Field(
        ...,
        min_length=1,
        description="Plain text password",
    )


class FormResponse(BaseModel):
    """
    Description of a form for the presentation layer to render.

    ``error`` is set when a submission was rejected and the form should be
    shown again with a message.
    """

    form: str = Field(..., examples=["login", "register", "memo_add", "memo_edit"])
    fields: list[str] = Field(default_factory=list)
    error: Optional[str] = None
    memo: Optional[MemoResponse] = None
