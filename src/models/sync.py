"""Sync action types produced by the projector and applied by the document store."""

from dataclasses import dataclass

from src.models.user import PublicUserRecord


class ServerTimestamp:
    """Placeholder for "the store's clock at write time".

    The projector emits it; only the document store resolves it, so every
    timestamp in a write comes from a single clock.
    """

    _instance: "ServerTimestamp | None" = None

    def __new__(cls) -> "ServerTimestamp":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = ServerTimestamp()


@dataclass(frozen=True)
class DeleteAction:
    """Remove the public record keyed by user_id."""

    user_id: str


@dataclass(frozen=True)
class MergeAction:
    """Merge patch into the public record keyed by user_id.

    Keys in patch overwrite the stored values; any other stored column is
    left untouched.
    """

    user_id: str
    patch: PublicUserRecord


SyncAction = DeleteAction | MergeAction
