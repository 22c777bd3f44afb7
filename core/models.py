"""
Record models persisted in the users and memos collections.

Field aliases match the keys used in the JSON data files, so files written
by earlier versions of the app load unchanged.
"""

from pydantic import Field

from core.storage.base import Record


class User(Record):
    """A registered account."""

    username: str = Field(
        ...,
        description="Unique, case-sensitive login name",
    )
    password_hash: str = Field(
        ...,
        alias="password",
        description="Salted one-way hash of the password",
    )


class Memo(Record):
    """A memo owned by one user."""

    title: str = Field(default="", description="Memo title")
    content: str = Field(default="", description="Memo body")
    owner_id: str = Field(
        ...,
        alias="userId",
        description="Id of the user who created the memo",
    )

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on title or content."""
        needle = query.lower()
        return needle in self.title.lower() or needle in self.content.lower()
