"""
Pydantic schemas for API request/response validation.
"""

from api.schemas.memo import (
    MemoWriteRequest,
    MemoResponse,
    MemoListResponse,
)
from api.schemas.user import (
    CredentialsRequest,
    FormResponse,
)

__all__ = [
    "MemoWriteRequest",
    "MemoResponse",
    "MemoListResponse",
    "CredentialsRequest",
    "FormResponse",
]
