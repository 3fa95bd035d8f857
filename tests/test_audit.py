"""Tests for the audit logger."""

import pytest

from kantor.audit import AuditLogger
from kantor.models import AuditEventBuilder
from kantor.services.storage import (
    InMemoryDocumentStore,
    PermissionDeniedError,
    SortDirection,
    collection_path,
)


class RejectingStore(InMemoryDocumentStore):
    async def add_document(self, path, data):
        raise PermissionDeniedError("Missing or insufficient permissions.")


class TestAuditLogger:
    """Tests for AuditLogger.log and its helpers."""

    @pytest.mark.asyncio
    async def test_local_only_without_storage(self):
        """Test logging without a store always succeeds."""
        audit = AuditLogger()
        assert await audit.log(AuditEventBuilder.sign_in_failed("a@b.com", "nope")) is True

    @pytest.mark.asyncio
    async def test_persists_to_user_audit_collection(self):
        """Test events for a known user land in users/{uid}/audit."""
        store = InMemoryDocumentStore()
        audit = AuditLogger(store)

        await audit.log_sign_in("a@b.com", user_id="u1")

        documents = await store.query_documents(
            collection_path("u1", "audit"), "timestamp", SortDirection.DESCENDING,
        )
        assert len(documents) == 1
        assert documents[0].data["event_type"] == "sign_in_succeeded"
        assert documents[0].data["user_id"] == "u1"

    @pytest.mark.asyncio
    async def test_anonymous_events_not_persisted(self):
        """Test failed sign-ins (no user yet) stay local."""
        store = InMemoryDocumentStore()
        audit = AuditLogger(store)

        await audit.log_sign_in("a@b.com", error_message="wrong password")

        assert store.count(collection_path("", "audit")) == 0

    @pytest.mark.asyncio
    async def test_debug_events_not_persisted(self):
        """Test routine loads are not written back to the store."""
        store = InMemoryDocumentStore()
        audit = AuditLogger(store)

        await audit.log_records_loaded("u1", "users/u1/transactions", 3)

        assert store.count(collection_path("u1", "audit")) == 0

    @pytest.mark.asyncio
    async def test_storage_failure_does_not_raise(self):
        """Test a rejected audit write is reported, not raised."""
        audit = AuditLogger(RejectingStore())
        event = AuditEventBuilder.record_create_failed("u1", "users/u1/data", "denied")
        assert await audit.log(event) is False

    @pytest.mark.asyncio
    async def test_unexpected_storage_failure_does_not_raise(self):
        """Test any failure from the audit store is reported, not raised."""

        class CrashingStore(InMemoryDocumentStore):
            async def add_document(self, path, data):
                raise RuntimeError("socket closed")

        audit = AuditLogger(CrashingStore())
        assert await audit.log(AuditEventBuilder.signed_out("u1")) is False

    @pytest.mark.asyncio
    async def test_long_identifier_is_logged(self):
        """Test oversized user input never fails event construction."""
        audit = AuditLogger()
        identifier = "a" * 600 + "@b.com"
        event = AuditEventBuilder.sign_in_failed(identifier, "nope")
        assert identifier in event.description
        assert await audit.log(event) is True

    def test_sign_out_is_local(self):
        """Test sign-out logging never needs the event loop or the store."""
        store = RejectingStore()
        AuditLogger(store).log_signed_out("u1")
        AuditLogger(store).log_signed_out(None)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
