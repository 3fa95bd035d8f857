"""
Tests for Kantor models

Test strategy:
1. Unit tests for individual components (models, rates, backends)
2. Controller tests against in-memory backends
3. No real API calls in tests (HTTP goes through httpx.MockTransport)
"""

import pytest
from pydantic import ValidationError

from kantor.models import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    ExchangeTransaction,
    Identity,
    SessionSnapshot,
    UserNote,
    format_transaction,
)


class TestExchangeTransaction:
    """Tests for the ExchangeTransaction model."""

    def test_to_document_uses_camel_case(self):
        """Test document field names match the mobile client."""
        transaction = ExchangeTransaction(
            from_currency="PLN",
            to_currency="EUR",
            amount=100.0,
            rate=4.35,
            result=435.0,
            timestamp=1700000000000,
            user_id="uid-1",
        )
        assert transaction.to_document() == {
            "fromCurrency": "PLN",
            "toCurrency": "EUR",
            "amount": 100.0,
            "rate": 4.35,
            "result": 435.0,
            "timestamp": 1700000000000,
            "userId": "uid-1",
        }

    def test_from_document_round_trip(self):
        """Test a document converts back to an equal record."""
        transaction = ExchangeTransaction(
            from_currency="USD",
            to_currency="GBP",
            amount=10.0,
            rate=1.2625,
            result=12.625,
            user_id="uid-1",
        )
        assert ExchangeTransaction.from_document(transaction.to_document()) == transaction

    def test_from_document_defaults_missing_fields(self):
        """Test absent fields fall back to empty defaults."""
        transaction = ExchangeTransaction.from_document({"fromCurrency": "CHF"})
        assert transaction.from_currency == "CHF"
        assert transaction.to_currency == ""
        assert transaction.amount == 0.0
        assert transaction.rate == 0.0
        assert transaction.result == 0.0
        assert transaction.timestamp == 0
        assert transaction.user_id == ""

    def test_from_document_accepts_integer_amounts(self):
        """Test whole numbers stored as integers read back as floats."""
        transaction = ExchangeTransaction.from_document({"amount": 100, "timestamp": "17"})
        assert transaction.amount == 100.0
        assert isinstance(transaction.amount, float)
        assert transaction.timestamp == 17

    def test_from_document_rejects_garbage(self):
        """Test non-numeric amounts raise ValueError."""
        with pytest.raises(ValueError):
            ExchangeTransaction.from_document({"amount": "lots"})

    def test_timestamp_defaults_to_now(self):
        """Test new records get a current epoch-millis timestamp."""
        transaction = ExchangeTransaction()
        assert transaction.timestamp > 1_600_000_000_000

    def test_is_immutable(self):
        """Test records cannot be edited after creation."""
        transaction = ExchangeTransaction(amount=1.0)
        with pytest.raises(ValidationError):
            transaction.amount = 2.0

    def test_format_transaction(self):
        """Test history line formatting."""
        transaction = ExchangeTransaction(
            from_currency="PLN",
            to_currency="EUR",
            amount=100.0,
            rate=4.35,
            result=435.0,
        )
        assert format_transaction(transaction) == (
            "100.0 PLN -> 435.00 EUR",
            "Rate: 4.3500",
        )


class TestUserNote:
    """Tests for the UserNote model."""

    def test_round_trip(self):
        """Test a note survives document conversion."""
        note = UserNote(title="Groceries", description="milk, eggs", timestamp=5)
        assert note.to_document() == {
            "title": "Groceries",
            "description": "milk, eggs",
            "timestamp": 5,
        }
        assert UserNote.from_document(note.to_document()) == note

    def test_missing_fields(self):
        """Test null and absent fields default."""
        note = UserNote.from_document({"title": None})
        assert note.title == ""
        assert note.description == ""
        assert note.timestamp == 0


class TestSessionModels:
    """Tests for Identity and SessionSnapshot."""

    def test_identity_hides_token_in_repr(self):
        """Test the bearer token never shows up in reprs."""
        identity = Identity(uid="u1", email="a@b.com", id_token="secret-token")
        assert "secret-token" not in repr(identity)

    def test_identity_requires_uid(self):
        """Test an empty uid is rejected."""
        with pytest.raises(ValueError):
            Identity(uid="")

    def test_snapshot_defaults(self):
        """Test a fresh snapshot is logged out and idle."""
        snapshot = SessionSnapshot()
        assert snapshot.is_logged_in is False
        assert snapshot.is_loading is False
        assert snapshot.last_error is None
        assert snapshot.records == ()
        assert snapshot.latest_record is None

    def test_snapshot_latest_record(self):
        """Test latest_record is the first (newest) record."""
        newest = UserNote(title="new", timestamp=2)
        oldest = UserNote(title="old", timestamp=1)
        snapshot = SessionSnapshot(records=(newest, oldest))
        assert snapshot.latest_record == newest


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.SIGNED_OUT,
            description="Signed out",
        )
        assert event.event_type == AuditEventType.SIGNED_OUT
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.sign_in_failed("a@b.com", "Wrong password")
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "sign_in_failed"
        assert log_dict["severity"] == "warning"
        assert log_dict["error_message"] == "Wrong password"
        assert log_dict["details"]["identifier"] == "a@b.com"

    def test_audit_event_to_document(self):
        """Test documents carry an epoch-millis timestamp."""
        event = AuditEventBuilder.sign_up_succeeded("a@b.com", "uid-1")
        document = event.to_document()
        assert isinstance(document["timestamp"], int)
        assert document["user_id"] == "uid-1"
        assert document["event_type"] == "sign_up_succeeded"

    def test_record_created_builder(self):
        """Test AuditEventBuilder.record_created."""
        event = AuditEventBuilder.record_created(
            "uid-1", "users/uid-1/transactions", "doc-1", {"amount": 1.0},
        )
        assert event.event_type == AuditEventType.RECORD_CREATED
        assert event.collection == "users/uid-1/transactions"
        assert event.details["document_id"] == "doc-1"

    def test_failure_builders_are_errors(self):
        """Test store failures are logged at error severity."""
        created = AuditEventBuilder.record_create_failed("u", "p", "denied")
        loaded = AuditEventBuilder.records_load_failed("u", "p", "denied")
        assert created.severity == AuditSeverity.ERROR
        assert loaded.severity == AuditSeverity.ERROR


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
