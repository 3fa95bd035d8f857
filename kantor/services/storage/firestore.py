"""
Firestore Document Store over the REST API

DESIGN DECISION: We call the Firestore REST API with the signed-in user's
ID token rather than using a service account. This way the project's
security rules (users may only touch users/{uid}/...) apply exactly as
they do for the mobile client.

Firestore's REST wire format wraps every value in a typed envelope:
    {"stringValue": "PLN"}, {"integerValue": "1700000000000"}, ...
encode_value/decode_value convert between that and plain Python values.
"""

from typing import Any, Callable, Optional

import httpx
import structlog

from kantor.config import FirebaseSettings, get_settings
from kantor.services.storage.interface import (
    ConnectionError,
    DocumentStoreInterface,
    NotFoundError,
    PermissionDeniedError,
    SortDirection,
    StorageError,
    StoredDocument,
)


logger = structlog.get_logger(__name__)


def encode_value(value: Any) -> dict[str, Any]:
    """Wrap a Python value in a Firestore typed value."""
    # bool before int: bool is a subclass of int
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    raise TypeError(f"Cannot store value of type {type(value).__name__} in Firestore")


def encode_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {key: encode_value(value) for key, value in data.items()}


def decode_value(value: dict[str, Any]) -> Any:
    """Unwrap a Firestore typed value."""
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "stringValue" in value:
        return value["stringValue"]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    # timestampValue, referenceValue, geoPointValue, bytesValue: keep the raw payload
    for raw in value.values():
        return raw
    return None


def decode_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: decode_value(value) for key, value in fields.items()}


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError, IndexError):
        return response.text or f"HTTP {response.status_code}"


def raise_for_firestore_status(response: httpx.Response) -> None:
    """Map a failed Firestore response onto the storage exception taxonomy."""
    if response.is_success:
        return
    message = _error_message(response)
    if response.status_code in (401, 403):
        raise PermissionDeniedError(message)
    if response.status_code == 404:
        raise NotFoundError(message)
    raise StorageError(message)


class FirestoreDocumentStore(DocumentStoreInterface):
    """
    Firestore implementation of the document store.

    Collection paths map directly onto Firestore paths:
    users/{uid}/transactions is the "transactions" subcollection of
    the users/{uid} document.
    """

    def __init__(
        self,
        token_provider: Callable[[], Optional[str]],
        settings: Optional[FirebaseSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            token_provider: Returns the current user's ID token (or None)
            settings: Firebase settings, loaded from the environment if omitted
            client: Shared HTTP client, created if omitted
        """
        self._token_provider = token_provider
        self._settings = settings or get_settings().firebase
        self._client = client or httpx.AsyncClient(
            timeout=self._settings.request_timeout_seconds,
        )

    @property
    def documents_url(self) -> str:
        return (
            f"{self._settings.firestore_base_url}/projects/{self._settings.project_id}"
            f"/databases/{self._settings.database_id}/documents"
        )

    def _headers(self) -> dict[str, str]:
        token = self._token_provider()
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def _post(self, url: str, body: dict) -> httpx.Response:
        try:
            response = await self._client.post(url, json=body, headers=self._headers())
        except httpx.RequestError as e:
            logger.warning("firestore_unreachable", url=url, error=str(e))
            raise ConnectionError(f"Could not reach Firestore: {e}")
        raise_for_firestore_status(response)
        return response

    async def add_document(self, path: str, data: dict[str, Any]) -> str:
        """Create a document with an auto-generated ID."""
        response = await self._post(
            f"{self.documents_url}/{path}",
            {"fields": encode_fields(data)},
        )
        try:
            name = response.json()["name"]
        except (ValueError, KeyError, TypeError):
            raise StorageError("Firestore did not return the created document name")
        return name.rsplit("/", 1)[-1]

    async def query_documents(
        self,
        path: str,
        order_by: str,
        direction: SortDirection = SortDirection.ASCENDING,
        limit: Optional[int] = None,
    ) -> list[StoredDocument]:
        """Run a structured query against one collection."""
        parent, _, collection_id = path.rpartition("/")
        url = f"{self.documents_url}/{parent}:runQuery" if parent else f"{self.documents_url}:runQuery"

        structured_query: dict[str, Any] = {
            "from": [{"collectionId": collection_id}],
            "orderBy": [
                {"field": {"fieldPath": order_by}, "direction": direction.value},
            ],
        }
        if limit is not None:
            structured_query["limit"] = limit

        response = await self._post(url, {"structuredQuery": structured_query})
        try:
            results = response.json()
        except ValueError:
            raise StorageError("Firestore returned a malformed query response")

        documents = []
        for item in results:
            # Entries without "document" only carry readTime/progress info
            document = item.get("document") if isinstance(item, dict) else None
            if not document:
                continue
            documents.append(
                StoredDocument(
                    document_id=document["name"].rsplit("/", 1)[-1],
                    path=path,
                    data=decode_fields(document.get("fields", {})),
                )
            )
        return documents
