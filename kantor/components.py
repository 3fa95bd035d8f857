"""
Application Wiring

Builds the identity provider, document store, audit logger and the
session controller for the configured backend and app variant.

DESIGN DECISION: Nothing in the package holds a module-level auth or
store handle. Everything is created here and passed in explicitly, so
tests build the same objects with in-memory backends.
"""

from typing import NamedTuple, Optional

import httpx
import structlog

from kantor.audit import AuditLogger
from kantor.config import Settings, get_settings
from kantor.services.auth import (
    FirebaseIdentityProvider,
    IdentityProviderInterface,
    InMemoryIdentityProvider,
)
from kantor.services.storage import (
    DocumentStoreInterface,
    FirestoreDocumentStore,
    GoogleSheetsClient,
    GoogleSheetsDocumentStore,
    InMemoryDocumentStore,
)
from kantor.session import ExchangeController, NoteController, SessionController


logger = structlog.get_logger(__name__)


class AppComponents(NamedTuple):
    identity_provider: IdentityProviderInterface
    store: DocumentStoreInterface
    audit_logger: AuditLogger
    controller: SessionController


def create_app_components(
    settings: Optional[Settings] = None,
    store_backend: Optional[str] = None,
    app_variant: Optional[str] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use (defaults to get_settings())
        store_backend: Override for AppSettings.store_backend
            ("firestore", "sheets" or "memory")
        app_variant: Override for AppSettings.app_variant
            ("exchange" or "note")

    Returns:
        AppComponents with the controller ready for a UI to drive
    """
    settings = settings or get_settings()
    app_settings = settings.app
    store_backend = store_backend or app_settings.store_backend
    app_variant = app_variant or app_settings.app_variant

    identity_provider: IdentityProviderInterface
    store: DocumentStoreInterface

    if store_backend == "memory":
        identity_provider = InMemoryIdentityProvider()
        store = InMemoryDocumentStore()
    else:
        firebase = settings.firebase
        client = httpx.AsyncClient(timeout=firebase.request_timeout_seconds)
        identity_provider = FirebaseIdentityProvider(firebase, client)
        if store_backend == "firestore":
            store = FirestoreDocumentStore(
                identity_provider.current_id_token,
                firebase,
                client,
            )
        elif store_backend == "sheets":
            store = GoogleSheetsDocumentStore(GoogleSheetsClient(settings.google_sheets))
        else:
            raise ValueError(f"Unknown store backend: {store_backend}")

    audit_logger = AuditLogger(store if app_settings.persist_audit_events else None)

    if app_variant == "exchange":
        controller: SessionController = ExchangeController(identity_provider, store, audit_logger)
    elif app_variant == "note":
        controller = NoteController(identity_provider, store, audit_logger)
    else:
        raise ValueError(f"Unknown app variant: {app_variant}")

    logger.info(
        "app_components_created",
        store_backend=store_backend,
        app_variant=app_variant,
        environment=app_settings.app_environment,
    )
    return AppComponents(identity_provider, store, audit_logger, controller)
