"""
In-Memory Identity Provider

Keeps accounts in a dict. Used by the test suite and the "memory" backend.
Error messages follow the wording of the Firebase provider so the UI looks
the same on both.
"""

from typing import Optional
from uuid import uuid4

from kantor.models.session import Identity
from kantor.services.auth.interface import (
    AccountExistsError,
    AuthError,
    IdentityProviderInterface,
    InvalidCredentialsError,
)
from kantor.services.auth.firebase_auth import FIREBASE_ERROR_MESSAGES


class InMemoryIdentityProvider(IdentityProviderInterface):
    """Email/password accounts held in process memory."""

    def __init__(self, current: Optional[Identity] = None):
        self._accounts: dict[str, tuple[str, Identity]] = {}
        self._current = current
        self.sign_out_calls = 0

    def add_account(self, identifier: str, secret: str) -> Identity:
        """Register an account without signing it in."""
        identity = Identity(uid=uuid4().hex, email=identifier, id_token=uuid4().hex)
        self._accounts[identifier] = (secret, identity)
        return identity

    def current_identity(self) -> Optional[Identity]:
        return self._current

    async def sign_in_with_credentials(self, identifier: str, secret: str) -> Identity:
        if not identifier or not secret:
            raise AuthError(FIREBASE_ERROR_MESSAGES["MISSING_PASSWORD"])
        account = self._accounts.get(identifier)
        if account is None or account[0] != secret:
            raise InvalidCredentialsError(
                FIREBASE_ERROR_MESSAGES["INVALID_LOGIN_CREDENTIALS"]
            )
        self._current = account[1]
        return self._current

    async def create_account(self, identifier: str, secret: str) -> Identity:
        if not identifier or not secret:
            raise AuthError(FIREBASE_ERROR_MESSAGES["MISSING_PASSWORD"])
        if identifier in self._accounts:
            raise AccountExistsError(FIREBASE_ERROR_MESSAGES["EMAIL_EXISTS"])
        self._current = self.add_account(identifier, secret)
        return self._current

    def sign_out(self) -> None:
        self.sign_out_calls += 1
        self._current = None
