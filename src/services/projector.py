"""Projection of private user records onto the public user table.

`project` is a pure function: it decides which single store operation keeps
the public record in step with the private one, and performs no I/O. Applying
its result is the job of `UserSyncService`.
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from src.models.sync import SERVER_TIMESTAMP, DeleteAction, MergeAction, SyncAction
from src.models.user import PrivateUserRecord, PublicUserRecord

logger = logging.getLogger(__name__)


class PreconditionViolationError(ValueError):
    """Raised when a change event cannot be attributed to a user."""


def validate_user_id(user_id: Any) -> str:
    """Return user_id if it is a usable identifier.

    Args:
        user_id: Identifier taken from the change event.

    Returns:
        str: The identifier, unchanged.

    Raises:
        PreconditionViolationError: If user_id is missing, not a string or blank.
    """
    if not isinstance(user_id, str) or not user_id.strip():
        raise PreconditionViolationError(f"Change event has no user id: {user_id!r}")
    return user_id


def _text_field(snapshot: PrivateUserRecord, key: str) -> str:
    value = snapshot.get(key)
    if not value:
        return ""
    if not isinstance(value, str):
        logger.debug("Ignoring non-string %s of type %s", key, type(value).__name__)
        return ""
    return value


def _hobbies_field(snapshot: PrivateUserRecord) -> list[str]:
    value = snapshot.get("hobbies")
    if not value:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(h, str) for h in value):
        logger.debug("Ignoring malformed hobbies of type %s", type(value).__name__)
        return []
    return list(value)


def _created_at_field(snapshot: PrivateUserRecord) -> Any:
    value = snapshot.get("createdAt")
    if not value:
        return SERVER_TIMESTAMP
    if not isinstance(value, (datetime, str)):
        logger.debug("Ignoring createdAt of type %s", type(value).__name__)
        return SERVER_TIMESTAMP
    return value


def build_public_patch(snapshot: PrivateUserRecord) -> PublicUserRecord:
    """Build the public merge patch for a private record snapshot.

    Missing, falsy or wrongly typed fields fall back to their defaults, so the
    patch always carries exactly the public keys and nothing else.

    Args:
        snapshot: Private record contents after the write.

    Returns:
        PublicUserRecord: Patch with keys name, city, bio, profilePic,
        hobbies, createdAt and updatedAt.
    """
    return PublicUserRecord(
        name=_text_field(snapshot, "name"),
        city=_text_field(snapshot, "city"),
        bio=_text_field(snapshot, "bio"),
        profilePic=_text_field(snapshot, "profilePic"),
        hobbies=_hobbies_field(snapshot),
        # First write wins when the private record carries it; otherwise the
        # store stamps it, on every sync.
        createdAt=_created_at_field(snapshot),
        updatedAt=SERVER_TIMESTAMP,
    )


def project(
    user_id: str,
    before_exists: bool,
    after: PrivateUserRecord | None,
) -> SyncAction:
    """Decide the public store operation for one private record write.

    Args:
        user_id: Key shared by the private and public records.
        before_exists: Whether the private record existed before the write.
            Deletion does not depend on it.
        after: Private record after the write, or None when it was deleted.

    Returns:
        SyncAction: DeleteAction when after is None, MergeAction otherwise.

    Raises:
        PreconditionViolationError: If user_id is missing or blank.
    """
    validate_user_id(user_id)

    if after is None:
        return DeleteAction(user_id=user_id)

    if not isinstance(after, Mapping):
        logger.debug("Treating non-mapping snapshot for user %s as empty", user_id)
        after = {}

    return MergeAction(user_id=user_id, patch=build_public_patch(after))
