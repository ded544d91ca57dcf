"""
Sale record CRUD and query operations.

Every read eagerly loads the card, the seller and (when present) the buyer,
and skips records that are soft-deleted or whose card is soft-deleted.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cardmarket.db.cards import card_to_model
from cardmarket.db.users import user_to_ref
from cardmarket.models.db import CardDB, ListingDB, utcnow
from cardmarket.models.listing import Listed, Listing, Sold


def _active_listings() -> Select[tuple[ListingDB]]:
    return (
        select(ListingDB)
        .join(ListingDB.card)
        .where(ListingDB.deleted_at.is_(None), CardDB.deleted_at.is_(None))
        .options(
            selectinload(ListingDB.card),
            selectinload(ListingDB.seller),
            selectinload(ListingDB.buyer),
        )
        .execution_options(populate_existing=True)
    )


async def create_listing(
    session: AsyncSession,
    card_id: int,
    seller_id: int,
    price: Decimal,
    status: str | None = None,
) -> ListingDB:
    """
    Insert a new listed (unsold) record.

    Returns the record re-read with its card and seller loaded.
    """
    listing = ListingDB(card_id=card_id, seller_id=seller_id, price=price, status=status)
    session.add(listing)
    await session.flush()

    loaded = await get_listing(session, listing.id)
    if loaded is None:
        msg = f"Listing {listing.id} not found after creation"
        raise RuntimeError(msg)
    return loaded


async def get_listing(session: AsyncSession, listing_id: int) -> ListingDB | None:
    """Get an active sale record by id, or None."""
    result = await session.execute(_active_listings().where(ListingDB.id == listing_id))
    return result.scalar_one_or_none()


async def list_listings(session: AsyncSession) -> list[ListingDB]:
    """Get every active sale record, ordered by id."""
    result = await session.execute(_active_listings().order_by(ListingDB.id))
    return list(result.scalars().all())


async def update_listing_fields(
    session: AsyncSession, listing_id: int, fields: dict[str, Any]
) -> ListingDB | None:
    """
    Merge the given column values over an existing record.

    Does not touch relationships directly; the record is re-read so the
    card and users reflect any changed foreign keys.
    Returns None if the record does not exist.
    """
    listing = await get_listing(session, listing_id)
    if listing is None:
        return None

    for key, value in fields.items():
        setattr(listing, key, value)

    await session.flush()
    return await get_listing(session, listing_id)


async def mark_sold(
    session: AsyncSession, listing_id: int, buyer_id: int, sold_at: datetime
) -> bool:
    """
    Attach a buyer to a listed record in a single conditional UPDATE.

    Only a record whose buyer is still null is claimed, so of two concurrent
    purchases at most one succeeds.

    Returns True if this call claimed the record.
    """
    result = await session.execute(
        update(ListingDB)
        .where(
            ListingDB.id == listing_id,
            ListingDB.buyer_id.is_(None),
            ListingDB.deleted_at.is_(None),
        )
        .values(buyer_id=buyer_id, sold_at=sold_at, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    # rowcount is available on UPDATE results; type stubs incomplete for async
    return int(result.rowcount) == 1  # type: ignore[attr-defined]


async def delete_listing(session: AsyncSession, listing_id: int) -> bool:
    """
    Soft-delete a sale record in any state.

    Returns True if deleted, False if not found.
    """
    listing = await get_listing(session, listing_id)
    if listing is None:
        return False

    listing.deleted_at = utcnow()
    await session.flush()
    return True


async def get_listings_for_card(session: AsyncSession, card_id: int) -> list[ListingDB]:
    """Get the card's unsold records, cheapest first."""
    result = await session.execute(
        _active_listings()
        .where(ListingDB.card_id == card_id, ListingDB.buyer_id.is_(None))
        .order_by(ListingDB.price.asc(), ListingDB.id.asc())
    )
    return list(result.scalars().all())


async def get_sales_for_card(session: AsyncSession, card_id: int) -> list[ListingDB]:
    """Get the card's completed sales in chronological order."""
    result = await session.execute(
        _active_listings()
        .where(ListingDB.card_id == card_id, ListingDB.buyer_id.is_not(None))
        .order_by(ListingDB.sold_at.asc(), ListingDB.id.asc())
    )
    return list(result.scalars().all())


def listing_to_model(db_listing: ListingDB) -> Listing:
    """Convert a database sale record to a domain model with an explicit state."""
    state: Listed | Sold
    if db_listing.buyer is None:
        state = Listed(price=db_listing.price)
    else:
        if db_listing.sold_at is None:
            msg = f"Listing {db_listing.id} has a buyer but no sale timestamp"
            raise RuntimeError(msg)
        state = Sold(
            price=db_listing.price,
            buyer=user_to_ref(db_listing.buyer),
            sold_at=db_listing.sold_at,
        )

    return Listing(
        id=db_listing.id,
        card=card_to_model(db_listing.card),
        seller=user_to_ref(db_listing.seller),
        state=state,
        status=db_listing.status,
        created_at=db_listing.created_at,
        updated_at=db_listing.updated_at,
    )
