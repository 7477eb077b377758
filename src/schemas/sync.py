"""Pydantic schemas for private user change events and webhook acknowledgements."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class WebhookEventType(str, Enum):
    """Row operations reported by the database webhook."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class DatabaseWebhookPayload(BaseModel):
    """Body posted by a Supabase database webhook on a row change.

    `record` is the row after the write (absent for DELETE) and
    `old_record` the row before it (absent for INSERT).
    """

    model_config = ConfigDict(populate_by_name=True)

    type: WebhookEventType = Field(description="Row operation")
    table: str = Field(description="Table the row belongs to")
    schema_name: str | None = Field(default=None, alias="schema", description="Database schema of the table")
    record: dict[str, Any] | None = Field(default=None, description="Row after the write")
    old_record: dict[str, Any] | None = Field(default=None, description="Row before the write")


class ChangeEvent(BaseModel):
    """Before/after snapshots of one private user record write."""

    user_id: str | None = Field(description="Key of the private record")
    before: dict[str, Any] | None = Field(default=None, description="Record before the write, if it existed")
    after: dict[str, Any] | None = Field(default=None, description="Record after the write, None when deleted")

    @property
    def before_exists(self) -> bool:
        return self.before is not None


class SyncStatus(str, Enum):
    """Outcome of handling one webhook delivery."""

    SYNCED = "synced"
    DELETED = "deleted"
    IGNORED = "ignored"


class WebhookAck(BaseModel):
    """Acknowledgement returned to the database webhook."""

    status: SyncStatus = Field(description="What the handler did")
    user_id: str | None = Field(default=None, description="User whose public record was touched")


class ReconcileResult(BaseModel):
    """Counts from a full reconciliation pass."""

    merged: int = Field(default=0, description="Public records rewritten from private records")
    deleted: int = Field(default=0, description="Orphaned public records removed")
