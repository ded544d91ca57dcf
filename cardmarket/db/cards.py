"""
Card CRUD and query operations.

Provides async functions for creating, reading, updating, soft-deleting and
querying catalog cards. Every read excludes soft-deleted cards.
"""

from typing import Any

from sqlalchemy import ColumnElement, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cardmarket.models.card import Card, CardCreate
from cardmarket.models.db import CardDB, ListingDB, utcnow

_ACTIVE = CardDB.deleted_at.is_(None)


async def create_card(session: AsyncSession, data: CardCreate) -> CardDB:
    """Insert a new card and return it with its assigned id."""
    card = CardDB(
        name=data.name,
        type=data.type,
        description=data.description,
        race=data.race,
        archetype=data.archetype,
        image=data.image,
    )
    session.add(card)
    await session.flush()
    return card


async def get_card(session: AsyncSession, card_id: int) -> CardDB | None:
    """
    Get an active card by id.

    Returns None if the card does not exist or was deleted.
    """
    result = await session.execute(select(CardDB).where(CardDB.id == card_id, _ACTIVE))
    return result.scalar_one_or_none()


async def update_card(session: AsyncSession, card_id: int, fields: dict[str, Any]) -> CardDB | None:
    """
    Merge the given fields over an existing card.

    Fields not present in `fields` keep their stored value.
    Returns None if the card does not exist.
    """
    card = await get_card(session, card_id)
    if card is None:
        return None

    for key, value in fields.items():
        setattr(card, key, value)

    await session.flush()
    return card


async def delete_card(session: AsyncSession, card_id: int) -> bool:
    """
    Soft-delete a card and the sale records that reference it.

    Returns True if deleted, False if not found.
    """
    card = await get_card(session, card_id)
    if card is None:
        return False

    now = utcnow()
    card.deleted_at = now
    await session.execute(
        update(ListingDB)
        .where(ListingDB.card_id == card_id, ListingDB.deleted_at.is_(None))
        .values(deleted_at=now)
    )
    await session.flush()
    return True


async def list_cards(session: AsyncSession) -> list[CardDB]:
    """Get every active card, ordered by id."""
    result = await session.execute(select(CardDB).where(_ACTIVE).order_by(CardDB.id))
    return list(result.scalars().all())


async def count_cards(session: AsyncSession, *criteria: ColumnElement[bool]) -> int:
    """Count active cards matching all criteria."""
    result = await session.execute(
        select(func.count()).select_from(CardDB).where(_ACTIVE, *criteria)
    )
    return int(result.scalar_one())


async def get_cards_window(
    session: AsyncSession,
    criteria: list[ColumnElement[bool]],
    offset: int,
    limit: int,
) -> list[CardDB]:
    """Get one window of active cards matching all criteria, ordered by id."""
    result = await session.execute(
        select(CardDB)
        .where(_ACTIVE, *criteria)
        .order_by(CardDB.id)
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all())


async def get_cards_by_archetype(session: AsyncSession, archetype: str) -> list[CardDB]:
    """Get active cards whose archetype exactly equals `archetype`."""
    result = await session.execute(
        select(CardDB).where(_ACTIVE, CardDB.archetype == archetype).order_by(CardDB.id)
    )
    return list(result.scalars().all())


async def get_random_cards(
    session: AsyncSession,
    criteria: list[ColumnElement[bool]],
    limit: int,
) -> list[CardDB]:
    """Get up to `limit` active cards matching all criteria in store-side random order."""
    result = await session.execute(
        select(CardDB).where(_ACTIVE, *criteria).order_by(func.random()).limit(limit)
    )
    return list(result.scalars().all())


def card_to_model(db_card: CardDB) -> Card:
    """Convert a database card to a domain model."""
    return Card(
        id=db_card.id,
        name=db_card.name,
        type=db_card.type,
        race=db_card.race,
        image=db_card.image,
        description=db_card.description,
        archetype=db_card.archetype,
        created_at=db_card.created_at,
        updated_at=db_card.updated_at,
    )
