"""
Signed session tokens.

Tokens use the compact JWT layout ``header.payload.signature`` with an
HS256 (HMAC-SHA256) signature over the base64url encoded header and
payload. The payload carries the user id claim and, when a lifetime is
configured, an ``exp`` UNIX timestamp.

Verification never looks the user up: a token stays valid for as long as
its signature does, even after the account it names is gone. Rotating the
signing secret is the only way to invalidate every issued token.
"""

import base64
import binascii
import hashlib
import hmac
import json
import time
from typing import Any, Optional

from core.errors import InvalidToken, MissingToken


USER_ID_CLAIM = "userId"
_HEADER = {"alg": "HS256", "typ": "JWT"}


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _encode_segment(value: dict[str, Any]) -> str:
    return _b64_url_encode(json.dumps(value, separators=(",", ":")).encode("utf-8"))


class TokenService:
    """
    Issues and verifies bearer session tokens.

    Usage:
        tokens = TokenService(secret=settings.jwt_secret)
        token = tokens.issue(user_id)
        assert tokens.verify(token) == user_id
    """

    def __init__(self, secret: str, expires_minutes: Optional[int] = None):
        """
        Args:
            secret: HMAC signing secret. Must be stable across restarts.
            expires_minutes: Token lifetime. None issues tokens that never expire.
        """
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret.encode("utf-8")
        self.expires_minutes = expires_minutes

    def _sign(self, message: bytes) -> bytes:
        return hmac.new(self._secret, message, hashlib.sha256).digest()

    def issue(self, user_id: str) -> str:
        """Create a signed token whose claim names ``user_id``."""
        claims: dict[str, Any] = {USER_ID_CLAIM: user_id}
        if self.expires_minutes is not None:
            claims["exp"] = int(time.time()) + self.expires_minutes * 60

        signing_input = f"{_encode_segment(_HEADER)}.{_encode_segment(claims)}"
        signature = _b64_url_encode(self._sign(signing_input.encode("utf-8")))
        return f"{signing_input}.{signature}"

    def verify(self, token: Optional[str]) -> str:
        """
        Validate a token and return the user id it carries.

        Raises:
            MissingToken: If no token was presented.
            InvalidToken: If the token is malformed, its signature does not
                match, it has no user id claim, or it has expired.
        """
        if not token:
            raise MissingToken()

        parts = token.split(".")
        if len(parts) != 3:
            raise InvalidToken()
        header_b64, payload_b64, signature_b64 = parts

        try:
            actual_sig = _b64_url_decode(signature_b64)
            claims = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, ValueError):
            raise InvalidToken()

        expected_sig = self._sign(f"{header_b64}.{payload_b64}".encode("utf-8"))
        if not hmac.compare_digest(expected_sig, actual_sig):
            raise InvalidToken()

        if not isinstance(claims, dict):
            raise InvalidToken()
        user_id = claims.get(USER_ID_CLAIM)
        if not isinstance(user_id, str) or not user_id:
            raise InvalidToken()

        exp = claims.get("exp")
        if exp is not None:
            if not isinstance(exp, (int, float)) or exp < time.time():
                raise InvalidToken("Token expired")

        return user_id
