"""Pytest configuration and fixtures."""

import json
import os
from collections.abc import Generator
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("WEBHOOK_SECRET", "test-webhook-secret")

from src.services.document_store import DocumentStore  # noqa: E402

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


class FakeQuery:
    """One PostgREST request against FakeSupabaseClient, built by chaining."""

    def __init__(self, client: "FakeSupabaseClient", table: str) -> None:
        self.client = client
        self.table = table
        self.operation: tuple[Any, ...] = ("select", "*")
        self.filters: list[tuple[str, Any]] = []
        self.window: tuple[int, int] | None = None

    def upsert(self, row: dict[str, Any], on_conflict: str = "id") -> "FakeQuery":
        # Encode like postgrest does, so non-JSON values fail here too.
        self.operation = ("upsert", json.loads(json.dumps(row)), on_conflict)
        return self

    def delete(self) -> "FakeQuery":
        self.operation = ("delete",)
        return self

    def select(self, columns: str = "*") -> "FakeQuery":
        self.operation = ("select", columns)
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append((column, value))
        return self

    def order(self, column: str) -> "FakeQuery":
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self.window = (start, end)
        return self

    def execute(self) -> SimpleNamespace:
        rows = self.client.tables.setdefault(self.table, {})
        kind = self.operation[0]

        if kind == "upsert":
            _, body, key_column = self.operation
            key = body[key_column]
            self.client.calls.append(("upsert", self.table, key))
            rows.setdefault(key, {}).update(body)
            return SimpleNamespace(data=[rows[key]])

        if kind == "delete":
            self.client.calls.append(("delete", self.table, self.filters[0][1]))
            deleted = [rows.pop(value) for _, value in self.filters if value in rows]
            return SimpleNamespace(data=deleted)

        columns = self.operation[1]
        selected = [rows[key] for key in sorted(rows)]
        if self.window is not None:
            selected = selected[self.window[0] : self.window[1] + 1]
        if columns != "*":
            names = [c.strip() for c in columns.split(",")]
            selected = [{n: row[n] for n in names if n in row} for row in selected]
        return SimpleNamespace(data=[dict(row) for row in selected])


class FakeSupabaseClient:
    """Dict-backed stand-in for the Supabase client's table API."""

    def __init__(self) -> None:
        self.tables: dict[str, dict[Any, dict[str, Any]]] = {}
        self.calls: list[tuple[str, str, Any]] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


class InMemoryDocumentStore(DocumentStore):
    """Real DocumentStore over FakeSupabaseClient, with a controllable clock."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        super().__init__(client=FakeSupabaseClient(), key_column="id", clock=lambda: self.now)
        self.now = now

    @property
    def tables(self) -> dict[str, dict[Any, dict[str, Any]]]:
        return self.client.tables

    @tables.setter
    def tables(self, value: dict[str, dict[Any, dict[str, Any]]]) -> None:
        self.client.tables = value

    @property
    def calls(self) -> list[tuple[str, str, Any]]:
        return self.client.calls


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from src.core.config import get_settings

    get_settings.cache_clear()
    settings = get_settings()
    yield settings
    get_settings.cache_clear()


@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    """Provide an empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def mock_supabase_client() -> Generator[MagicMock, None, None]:
    """Provide a mocked Supabase client.

    Yields:
        MagicMock: Mocked Supabase client for testing.
    """
    mock_client = MagicMock()

    mock_response = MagicMock()
    mock_response.data = []
    mock_client.table.return_value.select.return_value.limit.return_value.execute.return_value = (
        mock_response
    )

    with patch("src.core.supabase.get_supabase_client", return_value=mock_client):
        yield mock_client


@pytest.fixture
def client(
    mock_supabase_client: MagicMock,
    memory_store: InMemoryDocumentStore,
) -> Generator[TestClient, None, None]:
    """Provide a test client whose sync service writes to memory_store.

    Yields:
        TestClient: FastAPI test client.
    """
    from src.api.routes.webhooks import get_user_sync_service
    from src.main import app
    from src.services.user_sync_service import UserSyncService

    app.dependency_overrides[get_user_sync_service] = lambda: UserSyncService(store=memory_store)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
