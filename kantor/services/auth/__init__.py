"""
Authentication Services Package

Provides the abstract identity provider interface and its implementations.
Firebase is the production backend; the in-memory provider backs tests and
offline runs.
"""

from kantor.services.auth.interface import (
    AccountExistsError,
    AuthConnectionError,
    AuthError,
    IdentityProviderInterface,
    InvalidCredentialsError,
)
from kantor.services.auth.firebase_auth import (
    FIREBASE_ERROR_MESSAGES,
    FirebaseIdentityProvider,
    auth_error_from_response,
)
from kantor.services.auth.in_memory import InMemoryIdentityProvider

__all__ = [
    # Interface
    "IdentityProviderInterface",
    # Exceptions
    "AccountExistsError",
    "AuthConnectionError",
    "AuthError",
    "InvalidCredentialsError",
    # Implementations
    "FIREBASE_ERROR_MESSAGES",
    "FirebaseIdentityProvider",
    "InMemoryIdentityProvider",
    "auth_error_from_response",
]
