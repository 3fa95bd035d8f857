"""
Audit Models for Kantor

Every controller outcome is logged for audit purposes.
This provides:
1. Traceability of sign-ins, sign-ups and record writes
2. Debugging information when the backend rejects a call
3. A history the user can inspect alongside their records

Events are only ever appended, never edited or removed.
Secrets (passwords, tokens) never enter an event.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit. One per controller outcome."""
    # Authentication
    SIGN_IN_SUCCEEDED = "sign_in_succeeded"
    SIGN_IN_FAILED = "sign_in_failed"
    SIGN_UP_SUCCEEDED = "sign_up_succeeded"
    SIGN_UP_FAILED = "sign_up_failed"
    SIGNED_OUT = "signed_out"

    # Records
    RECORD_CREATED = "record_created"
    RECORD_CREATE_SKIPPED = "record_create_skipped"
    RECORD_CREATE_FAILED = "record_create_failed"
    RECORDS_LOADED = "records_loaded"
    RECORDS_LOAD_FAILED = "records_load_failed"


class AuditSeverity(str, Enum):
    """Maps onto the structlog level an event is logged at."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """One controller outcome and the identity it concerns."""

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Event ID"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="UTC time the outcome was recorded"
    )

    # What happened
    event_type: AuditEventType = Field(
        ...,
        description="Which controller outcome this is"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Log level the event is written at"
    )

    # Who and where
    user_id: Optional[str] = Field(
        default=None,
        description="uid of the identity the event concerns, if known"
    )
    collection: Optional[str] = Field(
        default=None,
        description="Store collection path touched by the event"
    )

    description: str = Field(
        ...,
        description="One-line summary for the log"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Outcome-specific fields (identifier, document ID, count)"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Flat dict for structlog keyword arguments."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "user_id": self.user_id,
            "collection": self.collection,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }

    def to_document(self) -> dict:
        """Convert to a store document (appended to users/{uid}/audit)."""
        document = self.to_log_dict()
        document["timestamp"] = int(self.timestamp.timestamp() * 1000)
        return document


class AuditEventBuilder:
    """
    Named constructors, one per controller outcome.

    Usage:
        event = AuditEventBuilder.sign_in_failed("a@b.com", "Wrong password")
        event = AuditEventBuilder.record_created(uid, path, document_id)
    """

    @staticmethod
    def sign_in_succeeded(identifier: str, user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIGN_IN_SUCCEEDED,
            user_id=user_id,
            description=f"Signed in: {identifier}",
            details={"identifier": identifier},
        )

    @staticmethod
    def sign_in_failed(identifier: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIGN_IN_FAILED,
            severity=AuditSeverity.WARNING,
            description=f"Sign-in rejected: {identifier}",
            details={"identifier": identifier},
            error_message=error_message,
        )

    @staticmethod
    def sign_up_succeeded(identifier: str, user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIGN_UP_SUCCEEDED,
            user_id=user_id,
            description=f"Account created: {identifier}",
            details={"identifier": identifier},
        )

    @staticmethod
    def sign_up_failed(identifier: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIGN_UP_FAILED,
            severity=AuditSeverity.WARNING,
            description=f"Account creation rejected: {identifier}",
            details={"identifier": identifier},
            error_message=error_message,
        )

    @staticmethod
    def signed_out(user_id: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIGNED_OUT,
            user_id=user_id,
            description="Signed out",
        )

    @staticmethod
    def record_created(
        user_id: str,
        collection: str,
        document_id: str,
        record: dict[str, Any],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_CREATED,
            user_id=user_id,
            collection=collection,
            description=f"Record {document_id} added to {collection}",
            details={"document_id": document_id, "record": record},
        )

    @staticmethod
    def record_create_skipped() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_CREATE_SKIPPED,
            severity=AuditSeverity.DEBUG,
            description="Record not persisted: no authenticated identity",
        )

    @staticmethod
    def record_create_failed(
        user_id: str,
        collection: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_CREATE_FAILED,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            collection=collection,
            description=f"Failed to add record to {collection}",
            error_message=error_message,
        )

    @staticmethod
    def records_loaded(user_id: str, collection: str, count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORDS_LOADED,
            severity=AuditSeverity.DEBUG,
            user_id=user_id,
            collection=collection,
            description=f"Loaded {count} record(s) from {collection}",
            details={"count": count},
        )

    @staticmethod
    def records_load_failed(
        user_id: str,
        collection: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORDS_LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            user_id=user_id,
            collection=collection,
            description=f"Failed to load records from {collection}",
            error_message=error_message,
        )
