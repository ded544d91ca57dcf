"""Request parameter types and response models shared by the card and listing endpoints."""

from dataclasses import asdict
from datetime import datetime
from typing import Annotated

from fastapi import Path
from pydantic import BaseModel, Field

from cardmarket.models.card import Card, CardPage
from cardmarket.models.listing import Listing, ListingStateName, UserRef

# Row ids are 64-bit integers in the store
MAX_ROW_ID = 2**63 - 1

CardId = Annotated[int, Path(le=MAX_ROW_ID)]
ListingId = Annotated[int, Path(le=MAX_ROW_ID)]


class CardResponse(BaseModel):
    """Response model for a single card."""

    id: int
    name: str
    type: str
    race: str
    image: str
    description: str | None = None
    archetype: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, card: Card) -> "CardResponse":
        return cls(**asdict(card))


class CardPageResponse(BaseModel):
    """Response model for one page of cards."""

    items: list[CardResponse] = Field(default_factory=list)
    total_count: int = Field(default=0, serialization_alias="totalCount")
    total_pages: int = Field(default=0, serialization_alias="totalPages")
    page: int = 1
    limit: int = 10

    @classmethod
    def from_model(cls, page: CardPage) -> "CardPageResponse":
        return cls(
            items=[CardResponse.from_model(c) for c in page.items],
            total_count=page.total_count,
            total_pages=page.total_pages,
            page=page.page,
            limit=page.limit,
        )


class UserResponse(BaseModel):
    """Response model for a user reference."""

    id: int
    username: str

    @classmethod
    def from_model(cls, user: UserRef) -> "UserResponse":
        return cls(id=user.id, username=user.username)


class ListingResponse(BaseModel):
    """Response model for a sale record."""

    id: int
    state: ListingStateName
    price: float
    card: CardResponse
    seller: UserResponse
    buyer: UserResponse | None = None
    sold_at: datetime | None = None
    status: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, listing: Listing) -> "ListingResponse":
        return cls(
            id=listing.id,
            state=listing.state.name,
            price=float(listing.price),
            card=CardResponse.from_model(listing.card),
            seller=UserResponse.from_model(listing.seller),
            buyer=UserResponse.from_model(listing.buyer) if listing.buyer else None,
            sold_at=listing.sold_at,
            status=listing.status,
            created_at=listing.created_at,
            updated_at=listing.updated_at,
        )
