"""
Abstract Identity Provider Interface

DESIGN DECISION: The session controllers never talk to an authentication
SDK directly. They receive an object implementing this interface, which
allows us to:
1. Swap Firebase for another provider later
2. Use an in-memory provider for testing
3. Keep credentials handling in one place
"""

from abc import ABC, abstractmethod
from typing import Optional

from kantor.models.session import Identity


class IdentityProviderInterface(ABC):
    """
    Abstract interface for email/password authentication.

    Providers keep track of the currently signed-in identity themselves;
    the controller only asks for it.
    """

    @abstractmethod
    def current_identity(self) -> Optional[Identity]:
        """
        The identity currently signed in, or None.
        """
        pass

    @abstractmethod
    async def sign_in_with_credentials(self, identifier: str, secret: str) -> Identity:
        """
        Sign in an existing account.

        Args:
            identifier: Email address, passed through unvalidated
            secret: Password, passed through unvalidated

        Returns:
            The signed-in identity (also becomes current_identity())

        Raises:
            AuthError: If the provider rejects the credentials or is unreachable
        """
        pass

    @abstractmethod
    async def create_account(self, identifier: str, secret: str) -> Identity:
        """
        Create a new account and sign it in.

        Raises:
            AuthError: If the account exists, the input is rejected,
                or the provider is unreachable
        """
        pass

    @abstractmethod
    def sign_out(self) -> None:
        """
        Forget the current identity. Local only, safe to call twice.
        """
        pass


class AuthError(Exception):
    """
    Base exception for authentication failures.

    str(error) is a human-readable message shown to the user as-is.
    """
    pass


class InvalidCredentialsError(AuthError):
    """Unknown account, wrong password, or disabled account."""
    pass


class AccountExistsError(AuthError):
    """Tried to create an account that already exists."""
    pass


class AuthConnectionError(AuthError):
    """Could not reach the identity provider."""
    pass
