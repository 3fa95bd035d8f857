"""
Session/Record Controllers

The controller is the only thing a UI talks to. It holds the observable
session state (logged in, loading, last error, loaded records) and turns
user intents into calls on the identity provider and the document store.

Flow for every async operation:
1. Enter the loading scope (is_loading stays true until the scope exits,
   on success and failure alike)
2. Clear the previous error
3. Call out to the provider / store
4. Fold the outcome into state: AuthError / StorageError become
   last_error and are never re-raised

DESIGN DECISION: The same operation is never run twice concurrently.
A second tap on "sign in" or "exchange" while the first is still in
flight is ignored. Different operations may overlap; the loading scope is
a depth counter so is_loading stays true until all of them finish.

Two variants share this base:
- ExchangeController: currency conversions, full history newest first
- NoteController: a single title/description note, newest wins
"""

import functools
from contextlib import contextmanager
from typing import Any, Awaitable, Callable, ClassVar, Iterator, Optional, Union

import structlog

from kantor.audit import AuditLogger
from kantor.exchange import convert
from kantor.models.records import ExchangeTransaction, Record, UserNote
from kantor.models.session import Identity, SessionSnapshot
from kantor.services.auth import AuthError, IdentityProviderInterface
from kantor.services.storage import (
    NOTES_COLLECTION,
    TRANSACTIONS_COLLECTION,
    DocumentStoreInterface,
    SortDirection,
    StorageError,
    collection_path,
)


logger = structlog.get_logger(__name__)

SessionListener = Callable[[SessionSnapshot], None]


def _message(error: Exception) -> str:
    """Text shown to the user for a provider or store failure."""
    return str(error) or type(error).__name__


def ignore_while_in_flight(result_when_busy: Any = None):
    """
    Drop calls to an async operation while a previous call is running.

    The dropped call returns result_when_busy and leaves state untouched.
    """
    def decorator(method):
        @functools.wraps(method)
        async def wrapper(self, *args, **kwargs):
            name = method.__name__
            if name in self._in_flight:
                logger.info("operation_ignored_in_flight", operation=name)
                return result_when_busy
            self._in_flight.add(name)
            try:
                return await method(self, *args, **kwargs)
            finally:
                self._in_flight.discard(name)
        return wrapper
    return decorator


class RecordController:
    """
    Shared session state and operations for both variants.

    Subclasses set the collection the records live in, the record type,
    and how many records a load keeps (None for all).
    """

    collection: ClassVar[str]
    record_type: ClassVar[type]
    load_limit: ClassVar[Optional[int]] = None

    def __init__(
        self,
        identity_provider: IdentityProviderInterface,
        store: DocumentStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._auth = identity_provider
        self._store = store
        self._audit = audit_logger or AuditLogger()

        self._is_logged_in = identity_provider.current_identity() is not None
        self._last_error: Optional[str] = None
        self._records: tuple[Record, ...] = ()
        self._loading_depth = 0
        self._version = 0

        self._listeners: list[SessionListener] = []
        self._in_flight: set[str] = set()

    # --- Observable state ---

    @property
    def is_logged_in(self) -> bool:
        return self._is_logged_in

    @property
    def is_loading(self) -> bool:
        return self._loading_depth > 0

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    def records(self) -> tuple[Record, ...]:
        return self._records

    @property
    def version(self) -> int:
        """Bumped on every state change; cheap to poll."""
        return self._version

    @property
    def identity(self) -> Optional[Identity]:
        return self._auth.current_identity()

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            is_logged_in=self._is_logged_in,
            is_loading=self.is_loading,
            last_error=self._last_error,
            records=self._records,
            version=self._version,
        )

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Call listener with a fresh snapshot after every state change.

        Returns a function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        self._version += 1
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                # A broken view must not break the session
                logger.exception("session_listener_failed", listener=repr(listener))

    def _update(self, **changes: Any) -> None:
        changed = False
        for name, value in changes.items():
            attr = f"_{name}"
            if getattr(self, attr) != value:
                setattr(self, attr, value)
                changed = True
        if changed:
            self._changed()

    @contextmanager
    def _loading(self) -> Iterator[None]:
        self._loading_depth += 1
        if self._loading_depth == 1:
            self._changed()
        try:
            yield
        finally:
            self._loading_depth -= 1
            if self._loading_depth == 0:
                self._changed()

    # --- Authentication ---

    @ignore_while_in_flight(False)
    async def sign_in(self, identifier: str, secret: str) -> bool:
        """
        Sign in with email and password.

        Returns True on success. On failure the provider's message is
        left in last_error and False is returned.
        """
        return await self._authenticate(
            self._auth.sign_in_with_credentials,
            identifier,
            secret,
            self._audit.log_sign_in,
        )

    @ignore_while_in_flight(False)
    async def sign_up(self, identifier: str, secret: str) -> bool:
        """Create an account and sign it in. Same contract as sign_in."""
        return await self._authenticate(
            self._auth.create_account,
            identifier,
            secret,
            self._audit.log_sign_up,
        )

    async def _authenticate(
        self,
        call: Callable[[str, str], Awaitable[Identity]],
        identifier: str,
        secret: str,
        audit: Callable[..., Awaitable[None]],
    ) -> bool:
        with self._loading():
            self._update(last_error=None)
            try:
                identity = await call(identifier, secret)
            except AuthError as e:
                message = _message(e)
                self._update(last_error=message)
                await audit(identifier, error_message=message)
                return False

            self._update(is_logged_in=True)
            await audit(identifier, user_id=identity.uid)
            return True

    def sign_out(self) -> None:
        """Sign out locally and forget loaded records. Safe to call twice."""
        identity = self._auth.current_identity()
        self._auth.sign_out()
        self._update(is_logged_in=False, records=())
        self._audit.log_signed_out(identity.uid if identity else None)

    # --- Records ---

    @ignore_while_in_flight()
    async def load_records(self) -> None:
        """
        Replace the loaded records with the user's records, newest first.

        Does nothing at all when nobody is signed in.
        """
        await self._load()

    async def _persist(self, build: Callable[[str], Record]) -> None:
        """
        Build a record for the signed-in user, store it, then reload.

        Without a signed-in user nothing is stored and no error is set;
        the loading flag still flips on and off.
        """
        with self._loading():
            self._update(last_error=None)
            identity = self._auth.current_identity()
            if identity is None:
                await self._audit.log_record_skipped()
                return

            record = build(identity.uid)
            path = collection_path(identity.uid, self.collection)
            document = record.to_document()
            try:
                document_id = await self._store.add_document(path, document)
            except StorageError as e:
                self._update(last_error=_message(e))
                await self._audit.log_record_failed(identity.uid, path, _message(e))
                return

            await self._audit.log_record_created(identity.uid, path, document_id, document)
            await self._load()

    async def _load(self) -> None:
        identity = self._auth.current_identity()
        if identity is None:
            return

        path = collection_path(identity.uid, self.collection)
        with self._loading():
            self._update(last_error=None)
            try:
                documents = await self._store.query_documents(
                    path,
                    order_by="timestamp",
                    direction=SortDirection.DESCENDING,
                    limit=self.load_limit,
                )
            except StorageError as e:
                self._update(last_error=_message(e))
                await self._audit.log_records_failed(identity.uid, path, _message(e))
                return

            records = []
            for document in documents:
                try:
                    records.append(self.record_type.from_document(document.data))
                except ValueError as e:
                    logger.warning(
                        "record_skipped_malformed",
                        path=path,
                        document_id=document.document_id,
                        error=str(e),
                    )
            self._update(records=tuple(records))
            await self._audit.log_records_loaded(identity.uid, path, len(records))


class ExchangeController(RecordController):
    """Currency exchange variant: every conversion is logged to history."""

    collection = TRANSACTIONS_COLLECTION
    record_type = ExchangeTransaction

    @property
    def transactions(self) -> tuple[ExchangeTransaction, ...]:
        return self._records

    @ignore_while_in_flight()
    async def create_record(
        self,
        from_currency: str,
        to_currency: str,
        amount: float,
    ) -> None:
        """Convert amount at the static rate and log the transaction."""
        rate, result = convert(amount, from_currency, to_currency)

        def build(uid: str) -> ExchangeTransaction:
            return ExchangeTransaction(
                from_currency=from_currency,
                to_currency=to_currency,
                amount=amount,
                rate=rate,
                result=result,
                user_id=uid,
            )

        await self._persist(build)


class NoteController(RecordController):
    """Note variant: the user's most recent note is the current one."""

    collection = NOTES_COLLECTION
    record_type = UserNote
    load_limit = 1

    @property
    def note(self) -> Optional[UserNote]:
        return self._records[0] if self._records else None

    @ignore_while_in_flight()
    async def create_record(self, title: str, description: str) -> None:
        """Save a new note; it becomes the current one after the reload."""
        await self._persist(
            lambda uid: UserNote(title=title, description=description)
        )


SessionController = Union[ExchangeController, NoteController]
