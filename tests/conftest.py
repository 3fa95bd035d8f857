"""Shared fixtures: in-memory backends and controllers wired to them."""

import pytest

from kantor.audit import AuditLogger
from kantor.services.auth import InMemoryIdentityProvider
from kantor.services.storage import InMemoryDocumentStore
from kantor.session import ExchangeController, NoteController


EMAIL = "a@b.com"
PASSWORD = "correct-horse"


@pytest.fixture
def provider():
    provider = InMemoryIdentityProvider()
    provider.add_account(EMAIL, PASSWORD)
    return provider


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def exchange(provider, store):
    return ExchangeController(provider, store, AuditLogger())


@pytest.fixture
def notes(provider, store):
    return NoteController(provider, store, AuditLogger())


@pytest.fixture
async def signed_in_exchange(exchange):
    assert await exchange.sign_in(EMAIL, PASSWORD)
    return exchange


@pytest.fixture
async def signed_in_notes(notes):
    assert await notes.sign_in(EMAIL, PASSWORD)
    return notes
