"""User record type definitions for the private and public user tables."""

from datetime import datetime
from typing import Any, TypedDict


class PrivateUserRecord(TypedDict, total=False):
    """Row of the private user table.

    Authoritative and access-restricted. Any field may be missing; fields
    other than the public whitelist (email, phone, ...) are never projected.
    """

    name: str
    city: str
    bio: str
    profilePic: str
    hobbies: list[str]
    createdAt: Any
    email: str


class PublicUserRecord(TypedDict):
    """Row of the public user table.

    Derived from a PrivateUserRecord and readable by other users. The
    timestamps may hold a ServerTimestamp until the store resolves them.
    """

    name: str
    city: str
    bio: str
    profilePic: str
    hobbies: list[str]
    createdAt: datetime | str | Any
    updatedAt: datetime | str | Any


# Scalar public fields, copied verbatim when they hold a non-empty string.
PUBLIC_TEXT_FIELDS: tuple[str, ...] = ("name", "city", "bio", "profilePic")

PUBLIC_USER_FIELDS: frozenset[str] = frozenset(
    PUBLIC_TEXT_FIELDS + ("hobbies", "createdAt", "updatedAt")
)
