"""
Data Models Package

This package contains all Pydantic models used in Kantor.
All data flowing through the system must conform to these schemas.
"""

from kantor.models.records import (
    ExchangeTransaction,
    Record,
    UserNote,
    format_transaction,
    now_millis,
)
from kantor.models.session import Identity, SessionSnapshot
from kantor.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "ExchangeTransaction",
    "Record",
    "UserNote",
    "format_transaction",
    "now_millis",
    # Session models
    "Identity",
    "SessionSnapshot",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
