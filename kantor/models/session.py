"""
Session Models

Identity is what the identity provider hands back after a successful
sign-in. SessionSnapshot is the read-only view of a controller's state
that UI surfaces render from.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from kantor.models.records import Record


class Identity(BaseModel):
    """An authenticated user as reported by the identity provider."""
    model_config = ConfigDict(frozen=True)

    uid: str = Field(
        ...,
        min_length=1,
        description="Stable unique user ID issued by the provider"
    )
    email: Optional[str] = Field(
        default=None,
        description="Identifier the user signed in with"
    )
    # Bearer token for the document store. Kept out of reprs and logs.
    id_token: Optional[str] = Field(default=None, repr=False)


class SessionSnapshot(BaseModel):
    """
    Immutable view of a controller's state.

    `version` increases by one on every state change, so a poller can
    compare versions instead of diffing fields.
    """
    model_config = ConfigDict(frozen=True)

    is_logged_in: bool = False
    is_loading: bool = False
    last_error: Optional[str] = None
    records: tuple[Record, ...] = ()
    version: int = 0

    @property
    def latest_record(self) -> Optional[Record]:
        """Newest loaded record (records are kept newest first)."""
        return self.records[0] if self.records else None
