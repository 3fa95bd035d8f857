"""
Google Sheets Document Store

DESIGN DECISION: Google Sheets is the alternative to Firestore for running
without a Firebase database. The history can be opened and read directly
in the spreadsheet.

TRADEOFFS:
- Every query reads the whole worksheet; sorting and limits happen in Python
- No per-user security rules: the service account sees every user

Each collection path gets its own worksheet, titled with ':' in place
of '/' (users:abc123:transactions). Documents are rows of
[document_id, created_at, data_json].
"""

import json
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

import gspread
import structlog
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from kantor.config import GoogleSheetsSettings, get_settings
from kantor.services.storage.interface import (
    ConnectionError,
    DocumentStoreInterface,
    PermissionDeniedError,
    SortDirection,
    StorageError,
    StoredDocument,
)


logger = structlog.get_logger(__name__)


DOCUMENT_COLUMNS = [
    "document_id",
    "created_at",
    "data_json",
]


def worksheet_title(path: str) -> str:
    """Worksheet title for a collection path."""
    return path.strip("/").replace("/", ":")


class GoogleSheetsClient:
    """
    Owns the gspread connection and finds worksheets by collection path.

    Only connecting is retried; worksheet calls fail straight away.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Authorize with the service account key. Cached after the first call.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Open the configured spreadsheet once and keep it."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_collection_sheet(
        self,
        path: str,
        create: bool = True,
    ) -> Optional[gspread.Worksheet]:
        """
        Get the worksheet for a collection path.

        Creates it (with a header row) when missing and create is True,
        otherwise returns None for a missing collection.
        """
        spreadsheet = self.get_spreadsheet()
        title = worksheet_title(path)
        try:
            return spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            if not create:
                return None
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=1000,
                cols=len(DOCUMENT_COLUMNS),
            )
            sheet.append_row(DOCUMENT_COLUMNS)
            return sheet


def _storage_error(e: gspread.exceptions.APIError, action: str) -> StorageError:
    status = getattr(getattr(e, "response", None), "status_code", None)
    if status in (401, 403):
        return PermissionDeniedError(f"{action}: {e}")
    return StorageError(f"{action}: {e}")


class GoogleSheetsDocumentStore(DocumentStoreInterface):
    """
    Google Sheets implementation of the document store.

    Documents are stored as rows in a worksheet, one worksheet per
    collection. Document fields are JSON-serialized into one cell.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _document_to_row(self, document_id: str, data: dict[str, Any]) -> list:
        """Convert a document to a spreadsheet row."""
        return [
            document_id,
            datetime.now(timezone.utc).isoformat(),
            json.dumps(data, sort_keys=True),
        ]

    def _row_to_document(self, path: str, row: list) -> StoredDocument:
        """Convert a spreadsheet row to a StoredDocument."""
        data = json.loads(row[2]) if len(row) > 2 and row[2] else {}
        if not isinstance(data, dict):
            raise ValueError("data_json is not an object")
        return StoredDocument(document_id=row[0], path=path, data=data)

    async def add_document(self, path: str, data: dict[str, Any]) -> str:
        """Append a document row to the collection's worksheet."""
        document_id = uuid4().hex
        try:
            sheet = self._client.get_collection_sheet(path)
            sheet.append_row(
                self._document_to_row(document_id, data),
                value_input_option="RAW",
            )
        except gspread.exceptions.APIError as e:
            raise _storage_error(e, "Failed to add document")
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to add document: {e}")
        return document_id

    async def query_documents(
        self,
        path: str,
        order_by: str,
        direction: SortDirection = SortDirection.ASCENDING,
        limit: Optional[int] = None,
    ) -> list[StoredDocument]:
        """Read the whole worksheet, then sort and limit in Python."""
        try:
            sheet = self._client.get_collection_sheet(path, create=False)
            if sheet is None:
                return []
            all_rows = sheet.get_all_values()[1:]  # header row
        except gspread.exceptions.APIError as e:
            raise _storage_error(e, "Failed to query documents")
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to query documents: {e}")

        documents = []
        for row in all_rows:
            if not row or not row[0]:  # blank row
                continue
            try:
                document = self._row_to_document(path, row)
            except ValueError as e:
                logger.warning("sheets_row_skipped", path=path, document_id=row[0], error=str(e))
                continue
            if document.data.get(order_by) is None:
                continue
            documents.append(document)

        documents.sort(
            key=lambda doc: doc.data[order_by],
            reverse=direction == SortDirection.DESCENDING,
        )
        if limit is not None:
            documents = documents[:limit]
        return documents
