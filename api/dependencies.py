"""
FastAPI dependencies for dependency injection.

Provides singleton instances of core services to route handlers and
extracts the session token from the request.
"""

from typing import Any, Optional, TypeVar

from fastapi import Cookie, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ValidationError

from api.schemas.memo import MemoWriteRequest
from api.schemas.user import CredentialsRequest
from auth.credentials import CredentialStore
from auth.tokens import TokenService
from manager.memo_service import MemoService


SESSION_COOKIE = "token"
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

ModelT = TypeVar("ModelT", bound=BaseModel)

# Global singletons (set during app lifespan)
_memo_service: Optional[MemoService] = None
_credential_store: Optional[CredentialStore] = None
_token_service: Optional[TokenService] = None

bearer = HTTPBearer(auto_error=False)


def set_services(
    memo_service: Optional[MemoService],
    credential_store: Optional[CredentialStore],
    token_service: Optional[TokenService],
) -> None:
    """Set (or clear, with None) the global service instances."""
    global _memo_service, _credential_store, _token_service
    _memo_service = memo_service
    _credential_store = credential_store
    _token_service = token_service


async def get_memo_service() -> MemoService:
    """
    Dependency that provides the memo service.

    Usage:
        @router.get("/memos")
        async def list_memos(
            memo_service: MemoService = Depends(get_memo_service)
        ):
            ...
    """
    if _memo_service is None:
        raise RuntimeError("Memo service not initialized")
    return _memo_service


async def get_credential_store() -> CredentialStore:
    if _credential_store is None:
        raise RuntimeError("Credential store not initialized")
    return _credential_store


async def get_token_service() -> TokenService:
    if _token_service is None:
        raise RuntimeError("Token service not initialized")
    return _token_service


async def get_session_token(
    token: Optional[str] = Cookie(default=None),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> Optional[str]:
    """
    The raw session token, if any.

    The ``token`` cookie wins; an ``Authorization: Bearer`` header is used
    when there is no cookie. The token is not verified here.
    """
    if token:
        return token
    if credentials is not None:
        return credentials.credentials
    return None


async def parse_body(request: Request, model: type[ModelT]) -> ModelT:
    """
    Validate the request body against ``model``.

    Browser form posts (urlencoded or multipart) and JSON bodies are both
    accepted. Invalid input raises RequestValidationError, which FastAPI
    answers with 422.
    """
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith(FORM_CONTENT_TYPES):
            data: Any = dict(await request.form())
        else:
            data = await request.json()
    except ValueError as e:
        raise RequestValidationError([{
            "type": "json_invalid",
            "loc": ("body",),
            "msg": f"Invalid request body: {e}",
            "input": None,
        }]) from e

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError([
            {**error, "loc": ("body", *error["loc"])}
            for error in e.errors(include_url=False, include_context=False)
        ]) from e


async def get_credentials_body(request: Request) -> CredentialsRequest:
    return await parse_body(request, CredentialsRequest)


async def get_memo_body(request: Request) -> MemoWriteRequest:
    return await parse_body(request, MemoWriteRequest)
