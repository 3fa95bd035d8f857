"""Session/record controllers package."""

from kantor.session.controller import (
    ExchangeController,
    NoteController,
    RecordController,
    SessionController,
    SessionListener,
)

__all__ = [
    "ExchangeController",
    "NoteController",
    "RecordController",
    "SessionController",
    "SessionListener",
]
