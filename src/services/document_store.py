"""Document store adapter over Supabase tables.

Tables are addressed as collections of documents keyed by a single column.
`merge_set` upserts only the given columns, `delete` removes by key, and
ServerTimestamp placeholders are resolved here, at write time.
"""

import logging
from collections.abc import Callable, Iterator, Mapping
from datetime import datetime, timezone
from typing import Any

from supabase import Client

from src.models.sync import ServerTimestamp

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 500


def utc_now() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(timezone.utc)


class DocumentStore:
    """Keyed document operations against a Supabase project."""

    def __init__(
        self,
        client: Client,
        key_column: str = "id",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the store.

        Args:
            client: Supabase client used for every call.
            key_column: Column holding the document key in every table.
            clock: Source of the time that replaces ServerTimestamp placeholders.
        """
        self.client = client
        self.key_column = key_column
        self.clock = clock

    def resolve_server_timestamps(self, patch: Mapping[str, Any]) -> dict[str, Any]:
        """Build the JSON-ready row for a patch.

        Every ServerTimestamp becomes one write-time value and every
        datetime becomes an ISO-8601 string, since PostgREST bodies are JSON.

        Args:
            patch: Column values, possibly holding placeholders or datetimes.

        Returns:
            dict: A copy of patch safe to send to PostgREST.
        """
        now = self.clock().isoformat()
        row: dict[str, Any] = {}
        for key, value in patch.items():
            if isinstance(value, ServerTimestamp):
                row[key] = now
            elif isinstance(value, datetime):
                row[key] = value.isoformat()
            else:
                row[key] = value
        return row

    def merge_set(self, collection: str, key: str, patch: Mapping[str, Any]) -> None:
        """Create the document or overwrite only the columns present in patch.

        Args:
            collection: Table name.
            key: Document key.
            patch: Columns to write.
        """
        row = self.resolve_server_timestamps(patch)
        row[self.key_column] = key
        self.client.table(collection).upsert(row, on_conflict=self.key_column).execute()
        logger.debug("Merged %d columns into %s/%s", len(patch), collection, key)

    def delete(self, collection: str, key: str) -> None:
        """Delete the document if it exists. Deleting a missing key is a no-op.

        Args:
            collection: Table name.
            key: Document key.
        """
        self.client.table(collection).delete().eq(self.key_column, key).execute()
        logger.debug("Deleted %s/%s", collection, key)

    def list_documents(
        self,
        collection: str,
        columns: str = "*",
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Iterator[dict[str, Any]]:
        """Iterate over every document in a collection, ordered by key.

        Args:
            collection: Table name.
            columns: PostgREST column selection.
            page_size: Rows fetched per request.

        Yields:
            dict: One row per document.
        """
        start = 0
        while True:
            response = (
                self.client.table(collection)
                .select(columns)
                .order(self.key_column)
                .range(start, start + page_size - 1)
                .execute()
            )
            rows = response.data or []
            yield from rows
            if len(rows) < page_size:
                return
            start += page_size
