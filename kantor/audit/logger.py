"""
Audit Logger

DESIGN DECISION: Every controller outcome is logged.
This provides:
1. Complete traceability of sign-ins and record writes
2. Debugging capability when the backend rejects a call
3. An optional per-user history in the document store

Persisting an event goes through the same async document store as the
records. A failed audit write is logged and reported, never raised into
the controller. Passwords and tokens never reach this module.
"""

from typing import Optional

import structlog

from kantor.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from kantor.services.storage import (
    AUDIT_COLLECTION,
    DocumentStoreInterface,
    collection_path,
)


# JSON lines on the stdlib logging handlers
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Writes every AuditEvent to the structured log and, when a store is
    given, appends it to the user's users/{uid}/audit collection.
    """

    def __init__(
        self,
        storage: Optional[DocumentStoreInterface] = None,
    ):
        """
        Args:
            storage: Store to append events to. Local logging only when None.
        """
        self._storage = storage
        self._logger = structlog.get_logger("kantor.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Write one event.

        Always logged locally. Persists to storage if available and the
        event belongs to a known user.

        Returns True if storage write succeeded (or nothing to persist).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        # Debug-level events (loads, skips) stay local
        if self._storage and event.user_id and event.severity != AuditSeverity.DEBUG:
            try:
                await self._storage.add_document(
                    collection_path(event.user_id, AUDIT_COLLECTION),
                    event.to_document(),
                )
                return True
            except Exception as e:
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_sign_in(
        self,
        identifier: str,
        user_id: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> None:
        """Log a sign-in attempt (failed when error_message is set)."""
        if error_message is None:
            event = AuditEventBuilder.sign_in_succeeded(identifier, user_id or "")
        else:
            event = AuditEventBuilder.sign_in_failed(identifier, error_message)
        await self.log(event)

    async def log_sign_up(
        self,
        identifier: str,
        user_id: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> None:
        """Log an account creation attempt."""
        if error_message is None:
            event = AuditEventBuilder.sign_up_succeeded(identifier, user_id or "")
        else:
            event = AuditEventBuilder.sign_up_failed(identifier, error_message)
        await self.log(event)

    def log_signed_out(self, user_id: Optional[str]) -> None:
        """Log sign-out locally. Sign-out never touches the store."""
        event = AuditEventBuilder.signed_out(user_id)
        self._logger.info("audit_event", **event.to_log_dict())

    async def log_record_created(
        self,
        user_id: str,
        collection: str,
        document_id: str,
        record: dict,
    ) -> None:
        await self.log(
            AuditEventBuilder.record_created(user_id, collection, document_id, record)
        )

    async def log_record_skipped(self) -> None:
        await self.log(AuditEventBuilder.record_create_skipped())

    async def log_record_failed(
        self,
        user_id: str,
        collection: str,
        error_message: str,
    ) -> None:
        await self.log(
            AuditEventBuilder.record_create_failed(user_id, collection, error_message)
        )

    async def log_records_loaded(
        self,
        user_id: str,
        collection: str,
        count: int,
    ) -> None:
        await self.log(AuditEventBuilder.records_loaded(user_id, collection, count))

    async def log_records_failed(
        self,
        user_id: str,
        collection: str,
        error_message: str,
    ) -> None:
        await self.log(
            AuditEventBuilder.records_load_failed(user_id, collection, error_message)
        )
