"""
Sale record domain model.

Storage keeps the state implicit (nullable buyer and sold_at columns); the
domain makes it explicit as a tagged variant, translated at the repository edge.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from cardmarket.models.card import UNSET, Card


class ListingStateName(str, Enum):
    LISTED = "listed"
    SOLD = "sold"


@dataclass(frozen=True, slots=True)
class UserRef:
    """Non-owning reference to an externally managed user."""

    id: int
    username: str


@dataclass(frozen=True, slots=True)
class Listed:
    """An open offer to sell."""

    price: Decimal

    @property
    def name(self) -> ListingStateName:
        return ListingStateName.LISTED


@dataclass(frozen=True, slots=True)
class Sold:
    """A completed sale."""

    price: Decimal
    buyer: UserRef
    sold_at: datetime

    @property
    def name(self) -> ListingStateName:
        return ListingStateName.SOLD


ListingState = Listed | Sold


@dataclass(frozen=True, slots=True)
class Listing:
    """A sale record with its card and users resolved."""

    id: int
    card: Card
    seller: UserRef
    state: ListingState
    status: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def price(self) -> Decimal:
        return self.state.price

    @property
    def is_sold(self) -> bool:
        return isinstance(self.state, Sold)

    @property
    def buyer(self) -> UserRef | None:
        return self.state.buyer if isinstance(self.state, Sold) else None

    @property
    def sold_at(self) -> datetime | None:
        return self.state.sold_at if isinstance(self.state, Sold) else None


@dataclass(frozen=True, slots=True)
class ListingUpdate:
    """
    Partial update for a sale record.

    UNSET fields keep their stored value. Supplying buyer_id on a listed
    record performs the sale.
    """

    card_id: int | None = UNSET
    seller_id: int | None = UNSET
    buyer_id: int | None = UNSET
    price: Decimal | None = UNSET
    sold_at: datetime | None = UNSET
    status: str | None = UNSET

    def supplied(self) -> dict[str, Any]:
        """Return only the fields the caller actually supplied."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        return {name: value for name, value in values.items() if value is not UNSET}
