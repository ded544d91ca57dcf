"""
Listing API endpoints.

Sale records: offer a card for sale, buy an offer, edit or withdraw a record.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from cardmarket.api.identity import require_caller
from cardmarket.api.schemas import MAX_ROW_ID, ListingId, ListingResponse
from cardmarket.db.database import get_session
from cardmarket.models.listing import ListingUpdate
from cardmarket.services.marketplace import (
    create_listing,
    delete_listing,
    get_all_listings,
    get_listing,
    purchase_listing,
    update_listing,
)

router = APIRouter(prefix="/listings", tags=["listings"])


class ListingCreateRequest(BaseModel):
    """Request model for offering a card. The caller is the seller."""

    card_id: int | None = Field(default=None, le=MAX_ROW_ID, examples=[1])
    price: Decimal | None = Field(default=None, examples=["9.99"])
    status: str | None = Field(default=None, examples=["near mint"])


class ListingUpdateRequest(BaseModel):
    """
    Request model for a partial sale record update.

    Omitted fields keep their stored value. Supplying buyer_id on an open
    listing completes the sale.
    """

    card_id: int | None = Field(default=None, le=MAX_ROW_ID)
    seller_id: int | None = Field(default=None, le=MAX_ROW_ID)
    buyer_id: int | None = Field(default=None, le=MAX_ROW_ID)
    price: Decimal | None = None
    sold_at: datetime | None = None
    status: str | None = None


@router.get("", response_model=list[ListingResponse])
async def get_listings(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[ListingResponse]:
    """Get every active sale record, listed or sold."""
    return [ListingResponse.from_model(item) for item in await get_all_listings(session)]


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing_by_id(
    listing_id: ListingId,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ListingResponse:
    """Get a sale record by id."""
    return ListingResponse.from_model(await get_listing(session, listing_id))


@router.post("", response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
async def offer_card(
    request: ListingCreateRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    caller_id: Annotated[int, Depends(require_caller)],
) -> ListingResponse:
    """Offer a card for sale as the calling user."""
    listing = await create_listing(
        session,
        card_id=request.card_id,
        seller_id=caller_id,
        price=request.price,
        status=request.status,
    )
    return ListingResponse.from_model(listing)


@router.post("/{listing_id}/purchase", response_model=ListingResponse)
async def buy_listing(
    listing_id: ListingId,
    session: Annotated[AsyncSession, Depends(get_session)],
    caller_id: Annotated[int, Depends(require_caller)],
) -> ListingResponse:
    """
    Buy an open listing as the calling user.

    Returns 409 if the listing has already been sold.
    """
    return ListingResponse.from_model(await purchase_listing(session, listing_id, caller_id))


@router.patch("/{listing_id}", response_model=ListingResponse)
async def edit_listing(
    listing_id: ListingId,
    request: ListingUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    _caller: Annotated[int, Depends(require_caller)],
) -> ListingResponse:
    """Update the supplied fields of a sale record."""
    changes = ListingUpdate(**request.model_dump(exclude_unset=True))
    return ListingResponse.from_model(await update_listing(session, listing_id, changes))


@router.delete("/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def withdraw_listing(
    listing_id: ListingId,
    session: Annotated[AsyncSession, Depends(get_session)],
    _caller: Annotated[int, Depends(require_caller)],
) -> Response:
    """Soft-delete a sale record, listed or sold."""
    await delete_listing(session, listing_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
