"""
Firebase Authentication over the Identity Toolkit REST API

DESIGN DECISION: We talk to the public REST endpoints with httpx instead
of the Admin SDK, because the Admin SDK cannot verify a user's password.
These are the same endpoints the mobile SDKs use:
- accounts:signInWithPassword
- accounts:signUp

Firebase reports failures as bare codes (EMAIL_EXISTS, INVALID_PASSWORD...).
We translate them into the human-readable messages the mobile SDK shows,
since the UI displays them verbatim.
"""

from typing import Any, Optional

import httpx
import structlog

from kantor.config import FirebaseSettings, get_settings
from kantor.models.session import Identity
from kantor.services.auth.interface import (
    AccountExistsError,
    AuthConnectionError,
    AuthError,
    IdentityProviderInterface,
    InvalidCredentialsError,
)


logger = structlog.get_logger(__name__)


FIREBASE_ERROR_MESSAGES = {
    "EMAIL_NOT_FOUND": (
        "There is no user record corresponding to this identifier. "
        "The user may have been deleted."
    ),
    "INVALID_PASSWORD": "The password is invalid or the user does not have a password.",
    "INVALID_LOGIN_CREDENTIALS": (
        "The supplied auth credential is incorrect, malformed or has expired."
    ),
    "USER_DISABLED": "The user account has been disabled by an administrator.",
    "EMAIL_EXISTS": "The email address is already in use by another account.",
    "INVALID_EMAIL": "The email address is badly formatted.",
    "WEAK_PASSWORD": "The given password is invalid.",
    "MISSING_PASSWORD": "Given String is empty or null",
    "MISSING_EMAIL": "Given String is empty or null",
    "TOO_MANY_ATTEMPTS_TRY_LATER": (
        "We have blocked all requests from this device due to unusual activity. "
        "Try again later."
    ),
}

NETWORK_ERROR_MESSAGE = (
    "A network error (such as timeout, interrupted connection or unreachable host) "
    "has occurred."
)

_ERROR_TYPES: dict[str, type[AuthError]] = {
    "EMAIL_NOT_FOUND": InvalidCredentialsError,
    "INVALID_PASSWORD": InvalidCredentialsError,
    "INVALID_LOGIN_CREDENTIALS": InvalidCredentialsError,
    "USER_DISABLED": InvalidCredentialsError,
    "EMAIL_EXISTS": AccountExistsError,
}


def auth_error_from_response(status_code: int, body: Any) -> AuthError:
    """
    Build the right AuthError for a failed Identity Toolkit response.

    Firebase messages look like "EMAIL_EXISTS" or
    "WEAK_PASSWORD : Password should be at least 6 characters".
    Unknown codes are passed through unchanged.
    """
    try:
        raw = body["error"]["message"]
    except (KeyError, TypeError):
        return AuthError(f"Authentication request failed (HTTP {status_code})")

    code, _, detail = str(raw).partition(" : ")
    code = code.strip()
    message = FIREBASE_ERROR_MESSAGES.get(code, str(raw))
    if code == "WEAK_PASSWORD" and detail:
        message = f"{message} [ {detail.strip()} ]"
    return _ERROR_TYPES.get(code, AuthError)(message)


class FirebaseIdentityProvider(IdentityProviderInterface):
    """
    Email/password authentication against Firebase.

    The signed-in identity (including its ID token, which the Firestore
    store needs) is held in memory for the lifetime of the provider.
    """

    def __init__(
        self,
        settings: Optional[FirebaseSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._settings = settings or get_settings().firebase
        self._client = client or httpx.AsyncClient(
            timeout=self._settings.request_timeout_seconds,
        )
        self._current: Optional[Identity] = None

    def current_identity(self) -> Optional[Identity]:
        return self._current

    def current_id_token(self) -> Optional[str]:
        """Bearer token of the signed-in identity, for the document store."""
        # TODO: refresh through securetoken.googleapis.com when the one-hour
        # ID token expires instead of requiring a new sign-in.
        return self._current.id_token if self._current else None

    async def sign_in_with_credentials(self, identifier: str, secret: str) -> Identity:
        payload = await self._post(
            "accounts:signInWithPassword",
            {"email": identifier, "password": secret, "returnSecureToken": True},
        )
        self._current = self._identity_from(payload, identifier)
        return self._current

    async def create_account(self, identifier: str, secret: str) -> Identity:
        payload = await self._post(
            "accounts:signUp",
            {"email": identifier, "password": secret, "returnSecureToken": True},
        )
        self._current = self._identity_from(payload, identifier)
        return self._current

    def sign_out(self) -> None:
        self._current = None

    async def _post(self, endpoint: str, body: dict) -> dict:
        url = f"{self._settings.auth_base_url}/{endpoint}"
        try:
            response = await self._client.post(
                url,
                params={"key": self._settings.api_key},
                json=body,
            )
        except httpx.RequestError as e:
            logger.warning("firebase_auth_unreachable", endpoint=endpoint, error=str(e))
            raise AuthConnectionError(NETWORK_ERROR_MESSAGE)

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.is_success:
            raise auth_error_from_response(response.status_code, payload)
        if not isinstance(payload, dict):
            raise AuthError(
                f"Authentication request failed (HTTP {response.status_code})"
            )
        return payload

    @staticmethod
    def _identity_from(payload: dict, identifier: str) -> Identity:
        try:
            uid = payload["localId"]
        except KeyError:
            raise AuthError("Authentication response did not include a user ID")
        return Identity(
            uid=uid,
            email=payload.get("email", identifier),
            id_token=payload.get("idToken"),
        )
