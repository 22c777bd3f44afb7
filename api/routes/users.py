"""
User endpoints: registration, login and logout.

Bodies may be browser form posts or JSON. A successful login stores the
session token in an HTTP-only cookie named ``token``. Rejected logins and
registrations answer 200 with the form and an error message, so the client
can show the form again.
"""

from typing import Optional

from fastapi import APIRouter, Cookie, Depends
from fastapi.responses import RedirectResponse

from api.dependencies import (
    SESSION_COOKIE,
    get_credential_store,
    get_credentials_body,
    get_token_service,
)
from api.schemas.user import CredentialsRequest, FormResponse
from auth.credentials import CredentialStore
from auth.tokens import TokenService
from core.errors import DuplicateUsername, InvalidCredentials
from core.logging import get_logger


logger = get_logger(__name__)
router = APIRouter(prefix="/users", tags=["Users"])

CREDENTIAL_FIELDS = ["username", "password"]


@router.get("")
async def users_home(token: Optional[str] = Cookie(default=None)) -> RedirectResponse:
    """Send logged-in clients to the memo list and everyone else to the login form."""
    if token:
        return RedirectResponse("/memos", status_code=303)
    return RedirectResponse("/users/login", status_code=303)


@router.get("/login", response_model=FormResponse)
async def login_form() -> FormResponse:
    return FormResponse(form="login", fields=CREDENTIAL_FIELDS)


@router.get("/register", response_model=FormResponse)
async def register_form() -> FormResponse:
    return FormResponse(form="register", fields=CREDENTIAL_FIELDS)


@router.post("/login", response_model=FormResponse)
async def login(
    body: CredentialsRequest = Depends(get_credentials_body),
    credentials: CredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Check credentials and start a session.

    On success the token is set as an HTTP-only cookie and the client is
    redirected to the memo list.
    """
    try:
        user_id = await credentials.authenticate(body.username, body.password)
    except InvalidCredentials as e:
        return FormResponse(form="login", fields=CREDENTIAL_FIELDS, error=str(e))

    response = RedirectResponse("/memos", status_code=303)
    max_age = tokens.expires_minutes * 60 if tokens.expires_minutes else None
    response.set_cookie(
        SESSION_COOKIE,
        tokens.issue(user_id),
        httponly=True,
        samesite="lax",
        max_age=max_age,
    )
    return response


@router.post("/logout")
async def logout() -> RedirectResponse:
    """
    Drop the session cookie.

    The token itself stays valid; only the client's copy is removed.
    """
    response = RedirectResponse("/users/login", status_code=303)
    response.delete_cookie(SESSION_COOKIE, httponly=True, samesite="lax")
    return response


@router.post("/register", response_model=FormResponse)
async def register(
    body: CredentialsRequest = Depends(get_credentials_body),
    credentials: CredentialStore = Depends(get_credential_store),
):
    try:
        await credentials.register(body.username, body.password)
    except DuplicateUsername as e:
        return FormResponse(form="register", fields=CREDENTIAL_FIELDS, error=str(e))

    return RedirectResponse("/users/login", status_code=303)
