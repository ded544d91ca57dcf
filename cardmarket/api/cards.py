"""
Card API endpoints.

Provides catalog CRUD, paginated and filtered listing, archetype-biased
random samples, and the per-card marketplace views (open listings and
sale history).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from cardmarket.api.identity import require_caller
from cardmarket.api.schemas import CardId, CardPageResponse, CardResponse, ListingResponse
from cardmarket.db.database import get_session
from cardmarket.models.card import CardCreate, CardUpdate
from cardmarket.services.cards import add_card, edit_card, fetch_all_cards, fetch_card, remove_card
from cardmarket.services.catalog import (
    CardFilters,
    list_cards_page,
    parse_page_params,
    random_sample,
    search_cards,
)
from cardmarket.services.marketplace import listings_for_card, sales_for_card

router = APIRouter(prefix="/cards", tags=["cards"])


class CardCreateRequest(BaseModel):
    """Request model for creating a card. Name, type, race and image are required."""

    name: str | None = Field(default=None, examples=["Blue-Eyes White Dragon"])
    type: str | None = Field(default=None, examples=["Normal Monster"])
    race: str | None = Field(default=None, examples=["Dragon"])
    image: str | None = Field(default=None, examples=["/assets/89631139.jpg"])
    description: str | None = None
    archetype: str | None = Field(default=None, examples=["Blue-Eyes"])


class CardUpdateRequest(BaseModel):
    """
    Request model for a partial card update.

    Omitted fields keep their stored value; description and archetype may be
    sent as null to clear them.
    """

    name: str | None = None
    type: str | None = None
    race: str | None = None
    image: str | None = None
    description: str | None = None
    archetype: str | None = None


@router.get("", response_model=CardPageResponse)
async def get_cards_page(
    session: Annotated[AsyncSession, Depends(get_session)],
    page: str | None = None,
    limit: str | None = None,
) -> CardPageResponse:
    """
    Get one page of the catalog, ordered by id.

    Missing or non-numeric page/limit fall back to 1 and 10.
    """
    result = await list_cards_page(session, parse_page_params(page, limit))
    return CardPageResponse.from_model(result)


@router.get("/all", response_model=list[CardResponse])
async def get_all_cards(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[CardResponse]:
    """Get every active card."""
    return [CardResponse.from_model(c) for c in await fetch_all_cards(session)]


@router.get("/search", response_model=CardPageResponse)
async def search_catalog(
    session: Annotated[AsyncSession, Depends(get_session)],
    name: str | None = None,
    type: str | None = None,
    archetype: str | None = None,
    page: str | None = None,
    limit: str | None = None,
) -> CardPageResponse:
    """
    Search the catalog.

    name, type and archetype match as substrings ignoring case and accents;
    all supplied filters must match.
    """
    filters = CardFilters(name=name, type=type, archetype=archetype)
    result = await search_cards(session, filters, parse_page_params(page, limit))
    return CardPageResponse.from_model(result)


@router.get("/random", response_model=list[CardResponse])
async def get_random_cards(
    session: Annotated[AsyncSession, Depends(get_session)],
    count: Annotated[int | None, Query()] = None,
    archetype: str | None = None,
) -> list[CardResponse]:
    """
    Draw `count` distinct cards, preferring `archetype`.

    Falls back to other archetypes when the archetype is short of cards;
    returns an empty list when the archetype has none.
    """
    cards = await random_sample(session, count, archetype)
    return [CardResponse.from_model(c) for c in cards]


@router.get("/{card_id}", response_model=CardResponse)
async def get_card(
    card_id: CardId,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CardResponse:
    """Get a card by id."""
    return CardResponse.from_model(await fetch_card(session, card_id))


@router.post("", response_model=CardResponse, status_code=status.HTTP_201_CREATED)
async def create_card(
    request: CardCreateRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    _caller: Annotated[int, Depends(require_caller)],
) -> CardResponse:
    """Add a card to the catalog."""
    card = await add_card(session, CardCreate(**request.model_dump()))
    return CardResponse.from_model(card)


@router.patch("/{card_id}", response_model=CardResponse)
async def update_card(
    card_id: CardId,
    request: CardUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    _caller: Annotated[int, Depends(require_caller)],
) -> CardResponse:
    """Update the supplied fields of a card."""
    changes = CardUpdate(**request.model_dump(exclude_unset=True))
    return CardResponse.from_model(await edit_card(session, card_id, changes))


@router.delete("/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_card(
    card_id: CardId,
    session: Annotated[AsyncSession, Depends(get_session)],
    _caller: Annotated[int, Depends(require_caller)],
) -> Response:
    """Soft-delete a card together with its sale records."""
    await remove_card(session, card_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{card_id}/listings", response_model=list[ListingResponse])
async def get_card_listings(
    card_id: CardId,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[ListingResponse]:
    """Open offers for a card, cheapest first."""
    return [ListingResponse.from_model(item) for item in await listings_for_card(session, card_id)]


@router.get("/{card_id}/sales", response_model=list[ListingResponse])
async def get_card_sales(
    card_id: CardId,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[ListingResponse]:
    """Completed sales of a card, oldest first."""
    return [ListingResponse.from_model(item) for item in await sales_for_card(session, card_id)]
