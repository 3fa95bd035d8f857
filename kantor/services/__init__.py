"""
External Services Package

Contains the identity provider and document store integrations:
- auth: Firebase Authentication (plus in-memory provider)
- storage: Firestore / Google Sheets (plus in-memory store)
"""

from kantor.services.auth import (
    AuthError,
    FirebaseIdentityProvider,
    IdentityProviderInterface,
    InMemoryIdentityProvider,
)
from kantor.services.storage import (
    DocumentStoreInterface,
    FirestoreDocumentStore,
    GoogleSheetsDocumentStore,
    InMemoryDocumentStore,
    StorageError,
)

__all__ = [
    # Auth
    "AuthError",
    "FirebaseIdentityProvider",
    "IdentityProviderInterface",
    "InMemoryIdentityProvider",
    # Storage
    "DocumentStoreInterface",
    "FirestoreDocumentStore",
    "GoogleSheetsDocumentStore",
    "InMemoryDocumentStore",
    "StorageError",
]
