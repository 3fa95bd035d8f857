"""
In-Memory Document Store

Process-local implementation of the document store interface. Used by the
test suite and by the "memory" backend for running the app without any
cloud configuration. Nothing survives a restart.
"""

import copy
from typing import Any, Optional
from uuid import uuid4

from kantor.services.storage.interface import (
    DocumentStoreInterface,
    SortDirection,
    StoredDocument,
)


class InMemoryDocumentStore(DocumentStoreInterface):
    """
    Documents kept in a dict of collection path -> list of documents.

    Ordering follows Firestore: documents missing the order_by field are
    left out of the result, ties keep insertion order.
    """

    def __init__(self):
        self._collections: dict[str, list[StoredDocument]] = {}

    async def add_document(self, path: str, data: dict[str, Any]) -> str:
        document = StoredDocument(
            document_id=uuid4().hex,
            path=path,
            data=copy.deepcopy(data),
        )
        self._collections.setdefault(path, []).append(document)
        return document.document_id

    async def query_documents(
        self,
        path: str,
        order_by: str,
        direction: SortDirection = SortDirection.ASCENDING,
        limit: Optional[int] = None,
    ) -> list[StoredDocument]:
        documents = [
            doc for doc in self._collections.get(path, [])
            if doc.data.get(order_by) is not None
        ]
        documents.sort(
            key=lambda doc: doc.data[order_by],
            reverse=direction == SortDirection.DESCENDING,
        )
        if limit is not None:
            documents = documents[:limit]
        return [doc.model_copy(deep=True) for doc in documents]

    def count(self, path: str) -> int:
        """Number of documents stored under a collection path."""
        return len(self._collections.get(path, []))
