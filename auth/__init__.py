"""
Authentication: password hashing, session tokens and the credential store.

Exports the services used by the memo service and the API layer.
"""

from auth.credentials import CredentialStore
from auth.passwords import hash_password, verify_password
from auth.tokens import TokenService

__all__ = ["CredentialStore", "TokenService", "hash_password", "verify_password"]
