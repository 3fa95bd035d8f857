"""
Storage Services Package

Provides the abstract document store interface and its implementations.
Firestore is the primary backend, Google Sheets and in-memory are
drop-in alternatives.
"""

from kantor.services.storage.interface import (
    AUDIT_COLLECTION,
    NOTES_COLLECTION,
    TRANSACTIONS_COLLECTION,
    ConnectionError,
    DocumentStoreInterface,
    NotFoundError,
    PermissionDeniedError,
    SortDirection,
    StorageError,
    StoredDocument,
    collection_path,
)
from kantor.services.storage.in_memory import InMemoryDocumentStore
from kantor.services.storage.firestore import FirestoreDocumentStore
from kantor.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsDocumentStore,
)

__all__ = [
    # Interface
    "DocumentStoreInterface",
    "SortDirection",
    "StoredDocument",
    "collection_path",
    "AUDIT_COLLECTION",
    "NOTES_COLLECTION",
    "TRANSACTIONS_COLLECTION",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "PermissionDeniedError",
    "StorageError",
    # Implementations
    "FirestoreDocumentStore",
    "GoogleSheetsClient",
    "GoogleSheetsDocumentStore",
    "InMemoryDocumentStore",
]
