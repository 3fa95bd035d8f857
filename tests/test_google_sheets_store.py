"""
Tests for the Google Sheets document store

The gspread client is replaced by small fakes holding rows in lists.
"""

import json

import gspread
import pytest
import requests

from kantor.services.storage import (
    ConnectionError,
    GoogleSheetsDocumentStore,
    PermissionDeniedError,
    SortDirection,
    StorageError,
)
from kantor.services.storage.google_sheets import DOCUMENT_COLUMNS, worksheet_title


class FakeWorksheet:
    def __init__(self, rows=None):
        self.rows = [list(DOCUMENT_COLUMNS)] + list(rows or [])

    def append_row(self, row, value_input_option=None):
        self.rows.append(list(row))

    def get_all_values(self):
        return [list(row) for row in self.rows]


class FakeSheetsClient:
    """Stands in for GoogleSheetsClient: one FakeWorksheet per path."""

    def __init__(self):
        self.sheets = {}

    def get_collection_sheet(self, path, create=True):
        if path not in self.sheets:
            if not create:
                return None
            self.sheets[path] = FakeWorksheet()
        return self.sheets[path]


class FakeResponse:
    status_code = 403
    text = "denied"

    def json(self):
        return {"error": {"code": 403, "message": "denied", "status": "PERMISSION_DENIED"}}


class DeniedSheetsClient(FakeSheetsClient):
    def get_collection_sheet(self, path, create=True):
        raise gspread.exceptions.APIError(FakeResponse())


class OfflineSheetsClient(FakeSheetsClient):
    def get_collection_sheet(self, path, create=True):
        raise requests.exceptions.ConnectionError("Max retries exceeded")


class UnconfiguredSheetsClient(FakeSheetsClient):
    def get_collection_sheet(self, path, create=True):
        raise ConnectionError("Google credentials file not found: missing.json")


def row(document_id, data):
    return [document_id, "2024-01-01T00:00:00+00:00", json.dumps(data)]


@pytest.fixture
def client():
    return FakeSheetsClient()


@pytest.fixture
def store(client):
    return GoogleSheetsDocumentStore(client)


class TestGoogleSheetsDocumentStore:
    """Tests for GoogleSheetsDocumentStore."""

    def test_worksheet_title(self):
        """Test collection paths become valid worksheet titles."""
        assert worksheet_title("users/u1/transactions") == "users:u1:transactions"

    @pytest.mark.asyncio
    async def test_add_appends_json_row(self, store, client):
        """Test a document is one row with its fields as JSON."""
        document_id = await store.add_document("users/u1/data", {"title": "t", "timestamp": 5})

        rows = client.sheets["users/u1/data"].rows
        assert rows[0] == DOCUMENT_COLUMNS
        assert rows[1][0] == document_id
        assert json.loads(rows[1][2]) == {"title": "t", "timestamp": 5}

    @pytest.mark.asyncio
    async def test_missing_collection_is_empty(self, store, client):
        """Test querying never creates a worksheet."""
        assert await store.query_documents("users/u1/data", "timestamp") == []
        assert client.sheets == {}

    @pytest.mark.asyncio
    async def test_order_and_limit(self, store, client):
        """Test newest-first ordering and limit are applied in Python."""
        client.sheets["users/u1/data"] = FakeWorksheet([
            row("a", {"title": "first", "timestamp": 1}),
            row("c", {"title": "third", "timestamp": 3}),
            row("b", {"title": "second", "timestamp": 2}),
        ])

        documents = await store.query_documents(
            "users/u1/data", "timestamp", SortDirection.DESCENDING, limit=2,
        )

        assert [d.document_id for d in documents] == ["c", "b"]
        assert documents[0].data["title"] == "third"

    @pytest.mark.asyncio
    async def test_bad_rows_skipped(self, store, client):
        """Test empty, malformed and unordered rows are left out."""
        client.sheets["users/u1/transactions"] = FakeWorksheet([
            [],
            ["x", "2024-01-01", "{not json"],
            ["y", "2024-01-01", "[1, 2]"],
            row("z", {"amount": 1.0}),
            row("ok", {"amount": 2.0, "timestamp": 9}),
        ])

        documents = await store.query_documents("users/u1/transactions", "timestamp")

        assert [d.document_id for d in documents] == ["ok"]

    @pytest.mark.asyncio
    async def test_api_error_maps_to_permission_denied(self):
        """Test a 403 from the Sheets API becomes PermissionDeniedError."""
        store = GoogleSheetsDocumentStore(DeniedSheetsClient())
        with pytest.raises(PermissionDeniedError):
            await store.add_document("users/u1/data", {"timestamp": 1})
        with pytest.raises(StorageError):
            await store.query_documents("users/u1/data", "timestamp")

    @pytest.mark.asyncio
    async def test_transport_error_maps_to_storage_error(self):
        """Test network failures below gspread surface as StorageError."""
        store = GoogleSheetsDocumentStore(OfflineSheetsClient())
        with pytest.raises(StorageError, match="Max retries exceeded"):
            await store.add_document("users/u1/data", {"timestamp": 1})
        with pytest.raises(StorageError, match="Max retries exceeded"):
            await store.query_documents("users/u1/data", "timestamp")

    @pytest.mark.asyncio
    async def test_connection_error_keeps_its_type(self):
        """Test storage errors raised while connecting are not re-wrapped."""
        store = GoogleSheetsDocumentStore(UnconfiguredSheetsClient())
        with pytest.raises(ConnectionError, match="credentials file not found"):
            await store.query_documents("users/u1/data", "timestamp")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
