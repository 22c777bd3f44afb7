"""
Error taxonomy for the memo service.

Authentication and credential errors are raised by the auth package and
turned into soft responses by the API layer. Storage errors are fatal for
the request that hit them and are never retried.
"""

from typing import Optional


class MemoAppError(Exception):
    """Base class for all application errors."""

    message = "Application error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class Unauthenticated(MemoAppError):
    """No usable session token was presented."""

    message = "Permission denied"


class MissingToken(Unauthenticated):
    message = "No session token"


class InvalidToken(Unauthenticated):
    message = "Invalid token"


class InvalidCredentials(MemoAppError):
    """Unknown username or wrong password. The two are deliberately not distinguished."""

    message = "Invalid username or password"


class DuplicateUsername(MemoAppError):
    message = "User already exists"


class StorageUnavailable(MemoAppError):
    """The backing collection could not be read, parsed or written."""

    message = "Storage unavailable"


class DuplicateRecordId(MemoAppError):
    """A record with the same id already exists in the collection."""

    def __init__(self, record_id: str):
        super().__init__(f"Record {record_id} already exists")
        self.record_id = record_id
