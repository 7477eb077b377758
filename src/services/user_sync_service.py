"""Private-to-public user record sync."""

import logging

from src.core.config import get_settings
from src.core.supabase import get_supabase_client
from src.models.sync import DeleteAction, SyncAction
from src.schemas.sync import (
    ChangeEvent,
    DatabaseWebhookPayload,
    ReconcileResult,
    WebhookEventType,
)
from src.services.document_store import DocumentStore
from src.services.projector import PreconditionViolationError, project

logger = logging.getLogger(__name__)


class UserSyncService:
    """Keeps the public user table in step with the private one.

    Each call issues exactly one store operation per change event. Store
    errors are not caught: the event source relies on them to redeliver.
    """

    def __init__(self, store: DocumentStore | None = None) -> None:
        """Initialize the sync service.

        Args:
            store: Document store to write through. Defaults to one built on
                the process-wide Supabase client.
        """
        settings = get_settings()
        self.private_schema = settings.private_users_schema
        self.private_table = settings.private_users_table
        self.public_table = settings.public_users_table
        self.key_column = settings.user_key_column
        self.store = store or DocumentStore(get_supabase_client(), key_column=self.key_column)

    def event_from_webhook(self, payload: DatabaseWebhookPayload) -> ChangeEvent | None:
        """Turn a database webhook delivery into a change event.

        Args:
            payload: Parsed webhook body.

        Returns:
            ChangeEvent | None: The event, or None if the payload concerns
            another table.

        Raises:
            PreconditionViolationError: If an INSERT or UPDATE carries no
                record. Only DELETE yields an event without after-snapshot.
        """
        if payload.table != self.private_table:
            logger.debug("Ignoring webhook for table %s", payload.table)
            return None
        if payload.schema_name is not None and payload.schema_name != self.private_schema:
            logger.debug("Ignoring webhook for %s.%s", payload.schema_name, payload.table)
            return None

        if payload.type != WebhookEventType.DELETE and payload.record is None:
            raise PreconditionViolationError(f"{payload.type.value} delivery has no record")

        if payload.type == WebhookEventType.INSERT:
            before, after = None, payload.record
        elif payload.type == WebhookEventType.UPDATE:
            before, after = payload.old_record, payload.record
        else:
            before, after = payload.old_record, None

        row = after if after is not None else before
        user_id = (row or {}).get(self.key_column)

        return ChangeEvent(
            user_id=None if user_id is None else str(user_id),
            before=before,
            after=after,
        )

    async def apply(self, action: SyncAction) -> None:
        """Issue the store operation for an action.

        Args:
            action: Delete or merge produced by the projector.
        """
        if isinstance(action, DeleteAction):
            self.store.delete(self.public_table, action.user_id)
            logger.info("Deleted public user %s", action.user_id)
        else:
            self.store.merge_set(self.public_table, action.user_id, action.patch)
            logger.info("Synced user %s from private to public", action.user_id)

    async def sync_change(self, event: ChangeEvent) -> SyncAction:
        """Project a change event and apply the result.

        Args:
            event: Private record write to mirror.

        Returns:
            SyncAction: The action that was applied.

        Raises:
            PreconditionViolationError: If the event has no usable user id.
        """
        action = project(event.user_id, event.before_exists, event.after)
        await self.apply(action)
        return action

    async def reconcile(self) -> ReconcileResult:
        """Rebuild the public table from the private table.

        Re-projects every private record and deletes public records whose
        private record no longer exists. Repairs records left stale by a
        failed sync.

        Returns:
            ReconcileResult: Number of merges and deletes issued.
        """
        result = ReconcileResult()
        private_ids: set[str] = set()

        for row in self.store.list_documents(self.private_table):
            user_id = row.get(self.key_column)
            if user_id is None:
                logger.warning("Skipping private user row without %s", self.key_column)
                continue
            user_id = str(user_id)
            private_ids.add(user_id)
            await self.apply(project(user_id, True, row))
            result.merged += 1

        # Collect first so deletes do not shift the pages being read.
        orphans = [
            str(row[self.key_column])
            for row in self.store.list_documents(self.public_table, columns=self.key_column)
            if str(row[self.key_column]) not in private_ids
        ]
        for user_id in orphans:
            await self.apply(DeleteAction(user_id=user_id))
            result.deleted += 1

        logger.info(
            "Reconciled public users: %d merged, %d deleted",
            result.merged,
            result.deleted,
        )
        return result
