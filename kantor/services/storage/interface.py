"""
Abstract Document Store Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap Firestore for Google Sheets (or anything else) without touching
   the session controllers
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The interface is intentionally simple - we're not building a document
database. Records are append-only, so there is no update or delete.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


TRANSACTIONS_COLLECTION = "transactions"
NOTES_COLLECTION = "data"
AUDIT_COLLECTION = "audit"


def collection_path(uid: str, collection: str) -> str:
    """Per-user collection path, e.g. users/{uid}/transactions."""
    return f"users/{uid}/{collection}"


class SortDirection(str, Enum):
    """Ordering direction for queries."""
    ASCENDING = "ASCENDING"
    DESCENDING = "DESCENDING"


class StoredDocument(BaseModel):
    """A document as returned by a query, with its store-assigned ID."""
    model_config = ConfigDict(frozen=True)

    document_id: str
    path: str
    data: dict[str, Any] = Field(default_factory=dict)


class DocumentStoreInterface(ABC):
    """
    Abstract interface for the document store.

    Any storage implementation (Firestore, Google Sheets, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def add_document(self, path: str, data: dict[str, Any]) -> str:
        """
        Append a document to a collection.

        Args:
            path: Collection path, e.g. users/{uid}/transactions
            data: Document fields

        Returns:
            The store-assigned document ID

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def query_documents(
        self,
        path: str,
        order_by: str,
        direction: SortDirection = SortDirection.ASCENDING,
        limit: Optional[int] = None,
    ) -> list[StoredDocument]:
        """
        Fetch documents from a collection.

        Args:
            path: Collection path
            order_by: Field name to sort on
            direction: Sort direction
            limit: Maximum number of results (None for all)

        Returns:
            Matching documents in the requested order. An empty or
            missing collection yields an empty list.

        Raises:
            StorageError: If the read fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class PermissionDeniedError(StorageError):
    """The caller is not allowed to read or write this path."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
