"""Database model type definitions."""

from src.models.sync import SERVER_TIMESTAMP, DeleteAction, MergeAction, ServerTimestamp, SyncAction
from src.models.user import PUBLIC_USER_FIELDS, PrivateUserRecord, PublicUserRecord

__all__ = [
    "PrivateUserRecord",
    "PublicUserRecord",
    "PUBLIC_USER_FIELDS",
    "ServerTimestamp",
    "SERVER_TIMESTAMP",
    "DeleteAction",
    "MergeAction",
    "SyncAction",
]
