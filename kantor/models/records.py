"""
Record Models for Kantor

A record is one persisted unit of user data. Two kinds exist:
1. ExchangeTransaction - a logged currency conversion (exchange variant)
2. UserNote - a title/description note (note variant)

DESIGN DECISION: Records are immutable once created. The store is
append-only; there is no update or delete path anywhere in the system.

Serialization is explicit. Documents use camelCase field names so records
written by the mobile client stay readable, and every absent field has a
defined default instead of failing the whole read.
"""

import time
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def _as_float(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    return float(value)


def _as_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    return int(value)


class ExchangeTransaction(BaseModel):
    """
    A single currency conversion performed by a user.

    Invariant: result == amount * rate. Built by the exchange controller,
    never by hand in application code.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    from_currency: str = Field(
        default="",
        description="Source currency code (e.g. PLN)"
    )
    to_currency: str = Field(
        default="",
        description="Target currency code (e.g. EUR)"
    )
    amount: float = Field(
        default=0.0,
        description="Amount in the source currency"
    )
    rate: float = Field(
        default=0.0,
        description="Conversion rate applied"
    )
    result: float = Field(
        default=0.0,
        description="Amount in the target currency"
    )
    timestamp: int = Field(
        default_factory=now_millis,
        description="When the conversion happened (epoch millis)"
    )
    user_id: str = Field(
        default="",
        description="Owner identity uid"
    )

    def to_document(self) -> dict[str, Any]:
        """Convert to a store document."""
        return {
            "fromCurrency": self.from_currency,
            "toCurrency": self.to_currency,
            "amount": self.amount,
            "rate": self.rate,
            "result": self.result,
            "timestamp": self.timestamp,
            "userId": self.user_id,
        }

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "ExchangeTransaction":
        """Build from a store document, defaulting absent fields."""
        return cls(
            from_currency=_as_str(data.get("fromCurrency")),
            to_currency=_as_str(data.get("toCurrency")),
            amount=_as_float(data.get("amount")),
            rate=_as_float(data.get("rate")),
            result=_as_float(data.get("result")),
            timestamp=_as_int(data.get("timestamp")),
            user_id=_as_str(data.get("userId")),
        )


class UserNote(BaseModel):
    """A title/description note kept for a user."""
    model_config = ConfigDict(frozen=True)

    title: str = Field(default="", description="Note title")
    description: str = Field(default="", description="Note body")
    timestamp: int = Field(
        default_factory=now_millis,
        description="When the note was saved (epoch millis)"
    )

    def to_document(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "UserNote":
        return cls(
            title=_as_str(data.get("title")),
            description=_as_str(data.get("description")),
            timestamp=_as_int(data.get("timestamp")),
        )


Record = Union[ExchangeTransaction, UserNote]


def format_transaction(transaction: ExchangeTransaction) -> tuple[str, str]:
    """
    Human-readable lines for a transaction history entry.

    Returns (summary, rate_line), e.g.
    ("100.0 PLN -> 435.00 EUR", "Rate: 4.3500").
    """
    summary = (
        f"{transaction.amount} {transaction.from_currency} -> "
        f"{transaction.result:.2f} {transaction.to_currency}"
    )
    return summary, f"Rate: {transaction.rate:.4f}"
