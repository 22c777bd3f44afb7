"""
Credential store backed by the users collection.

Registration and login both go through the record store, so the users
collection is read in full on every call. Password hashing runs in a worker
thread.
"""

import asyncio
from typing import Optional

from auth.passwords import DEFAULT_ITERATIONS, hash_password, verify_password
from core.errors import DuplicateUsername, InvalidCredentials
from core.logging import get_logger
from core.models import User
from core.storage.base import BaseRecordStore


logger = get_logger(__name__)


class CredentialStore:
    """
    Registers users and checks their passwords.

    Usernames are unique and compared case-sensitively. Login failures do
    not reveal whether the username exists.
    """

    def __init__(
        self,
        users: BaseRecordStore[User],
        hash_iterations: int = DEFAULT_ITERATIONS,
    ):
        self.users = users
        self.hash_iterations = hash_iterations
        # Compared against when the username is unknown so both failure
        # paths cost one hash verification
        self._dummy_hash = hash_password("", iterations=hash_iterations)

    async def register(self, username: str, password: str) -> str:
        """
        Create a new user and return its id.

        Raises:
            DuplicateUsername: If the username is already taken.
        """
        # PBKDF2 is CPU-bound, keep it off the event loop
        password_hash = await asyncio.to_thread(
            hash_password, password, iterations=self.hash_iterations
        )

        async with self.users.transaction() as users:
            if any(user.username == username for user in users):
                logger.info("Registration rejected, username taken", username=username)
                raise DuplicateUsername()
            user = User(username=username, password_hash=password_hash)
            users.append(user)

        logger.info("User registered", user_id=user.id, username=username)
        return user.id

    async def authenticate(self, username: str, password: str) -> str:
        """
        Check a username/password pair and return the user id.

        Raises:
            InvalidCredentials: If the username is unknown or the password
                is wrong.
        """
        user = await self.find_by_username(username)
        stored_hash = user.password_hash if user else self._dummy_hash

        matches = await asyncio.to_thread(verify_password, password, stored_hash)
        if not matches or user is None:
            logger.info("Login failed", username=username)
            raise InvalidCredentials()

        logger.info("Login succeeded", user_id=user.id)
        return user.id

    async def find_by_username(self, username: str) -> Optional[User]:
        for user in await self.users.load_all():
            if user.username == username:
                return user
        return None

    async def get_user(self, user_id: str) -> Optional[User]:
        return await self.users.get(user_id)
