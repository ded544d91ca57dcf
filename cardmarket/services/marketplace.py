"""
Listing/sale state machine.

A sale record is either Listed (open offer, no buyer) or Sold (buyer and
sale timestamp attached). Records are created Listed, move to Sold exactly
once, and are retired only by deletion:

    create_listing ──> Listed ──purchase / update(buyer)──> Sold
                          │                                   │
                          └──────────── delete ───────────────┘

The Listed -> Sold step is a single conditional UPDATE on the store, so two
buyers racing for the same record cannot both win.
"""

import logging
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from cardmarket.db import listings as listing_db
from cardmarket.db.cards import get_card
from cardmarket.db.database import store_errors
from cardmarket.db.users import get_user
from cardmarket.models.db import ListingDB
from cardmarket.models.failure import (
    ConflictError,
    FailureKind,
    NotFoundError,
    ValidationError,
)
from cardmarket.models.listing import Listing, ListingUpdate

logger = logging.getLogger(__name__)

# NUMERIC(10, 2)
MAX_PRICE = Decimal("99999999.99")
PRICE_QUANTUM = Decimal("0.01")


def validate_price(price: Decimal | float | str | None) -> Decimal:
    """
    Coerce and check a sale price.

    Raises:
        ValidationError: If price is missing, not a number, not positive,
            or too large to store
    """
    if price is None:
        raise ValidationError(
            "Price is required", field="price", kind=FailureKind.MISSING_REQUIRED
        )
    try:
        value = Decimal(str(price))
    except InvalidOperation as e:
        raise ValidationError("Price must be a number", field="price") from e
    if not value.is_finite():
        raise ValidationError("Price must be a number", field="price")
    if value <= 0:
        raise ValidationError(
            "Price must be greater than zero", field="price", kind=FailureKind.OUT_OF_RANGE
        )
    if value > MAX_PRICE:
        raise ValidationError(
            f"Price must not exceed {MAX_PRICE}", field="price", kind=FailureKind.OUT_OF_RANGE
        )
    return value.quantize(PRICE_QUANTUM)


async def _require_card(session: AsyncSession, card_id: int) -> None:
    with store_errors("read card"):
        card = await get_card(session, card_id)
    if card is None:
        raise NotFoundError("card", card_id)


async def _require_user(session: AsyncSession, user_id: int) -> None:
    with store_errors("read user"):
        user = await get_user(session, user_id)
    if user is None:
        raise NotFoundError("user", user_id)


async def _require_listing(session: AsyncSession, listing_id: int) -> ListingDB:
    with store_errors("read listing"):
        db_listing = await listing_db.get_listing(session, listing_id)
    if db_listing is None:
        raise NotFoundError("listing", listing_id)
    return db_listing


async def _claim(
    session: AsyncSession, listing_id: int, buyer_id: int, sold_at: datetime | None
) -> None:
    """Run the Listed -> Sold transition or raise ConflictError."""
    with store_errors("mark listing sold"):
        claimed = await listing_db.mark_sold(
            session, listing_id, buyer_id, sold_at or datetime.now(UTC)
        )
    if not claimed:
        raise ConflictError(
            f"Listing {listing_id} has already been sold",
            detail="Another purchase completed first",
        )
    logger.info("Listing %d sold to user %d", listing_id, buyer_id)


async def create_listing(
    session: AsyncSession,
    card_id: int | None,
    seller_id: int | None,
    price: Decimal | float | str | None,
    status: str | None = None,
) -> Listing:
    """
    Offer a card for sale.

    Raises:
        ValidationError: If card, seller or price is missing, or price <= 0
        NotFoundError: If the card or seller does not exist
    """
    if card_id is None:
        raise ValidationError(
            "Card is required", field="card_id", kind=FailureKind.MISSING_REQUIRED
        )
    if seller_id is None:
        raise ValidationError(
            "Seller is required", field="seller_id", kind=FailureKind.MISSING_REQUIRED
        )
    amount = validate_price(price)

    await _require_card(session, card_id)
    await _require_user(session, seller_id)

    with store_errors("create listing"):
        db_listing = await listing_db.create_listing(session, card_id, seller_id, amount, status)
    logger.info("User %d listed card %d at %s", seller_id, card_id, amount)
    return listing_db.listing_to_model(db_listing)


async def get_listing(session: AsyncSession, listing_id: int) -> Listing:
    return listing_db.listing_to_model(await _require_listing(session, listing_id))


async def get_all_listings(session: AsyncSession) -> list[Listing]:
    with store_errors("list listings"):
        db_listings = await listing_db.list_listings(session)
    return [listing_db.listing_to_model(item) for item in db_listings]


async def purchase_listing(
    session: AsyncSession,
    listing_id: int,
    buyer_id: int,
    sold_at: datetime | None = None,
) -> Listing:
    """
    Buy a listed record.

    Raises:
        NotFoundError: If the listing or buyer does not exist
        ConflictError: If the listing is already sold
    """
    db_listing = await _require_listing(session, listing_id)
    if db_listing.buyer_id is not None:
        raise ConflictError(f"Listing {listing_id} has already been sold")
    await _require_user(session, buyer_id)

    await _claim(session, listing_id, buyer_id, sold_at)
    return await get_listing(session, listing_id)


async def update_listing(
    session: AsyncSession, listing_id: int, changes: ListingUpdate
) -> Listing:
    """
    Merge supplied fields over a sale record.

    Supplying a buyer on a listed record sells it; the sale timestamp defaults
    to now. A sold record keeps its buyer: clearing it or naming a different
    buyer is rejected. Price and status stay editable after the sale.

    Raises:
        ValidationError: If no field is supplied or a supplied value is invalid
        NotFoundError: If the record, or a referenced card or user, does not exist
        ConflictError: If the record was sold to someone else
    """
    supplied = changes.supplied()
    if not supplied:
        raise ValidationError(
            "At least one field must be supplied to update a listing",
            kind=FailureKind.MISSING_REQUIRED,
        )

    db_listing = await _require_listing(session, listing_id)
    is_sold = db_listing.buyer_id is not None

    fields: dict[str, Any] = {}

    if "card_id" in supplied:
        card_id = supplied["card_id"]
        if card_id is None:
            raise ValidationError("Card cannot be cleared", field="card_id")
        await _require_card(session, card_id)
        fields["card_id"] = card_id

    if "seller_id" in supplied:
        seller_id = supplied["seller_id"]
        if seller_id is None:
            raise ValidationError("Seller cannot be cleared", field="seller_id")
        await _require_user(session, seller_id)
        fields["seller_id"] = seller_id

    if "price" in supplied:
        fields["price"] = validate_price(supplied["price"])

    if "status" in supplied:
        fields["status"] = supplied["status"]

    buyer_id = supplied.get("buyer_id")
    sold_at = supplied.get("sold_at")
    sell_now = False

    if "buyer_id" in supplied:
        if buyer_id is None:
            if is_sold:
                raise ValidationError("A sold listing cannot be returned to sale", field="buyer_id")
        elif is_sold:
            if buyer_id != db_listing.buyer_id:
                raise ConflictError(f"Listing {listing_id} has already been sold")
        else:
            await _require_user(session, buyer_id)
            sell_now = True

    if "sold_at" in supplied and not sell_now:
        if not is_sold:
            raise ValidationError("A sale timestamp requires a buyer", field="sold_at")
        if sold_at is None:
            raise ValidationError("A sold listing must keep its sale timestamp", field="sold_at")
        fields["sold_at"] = sold_at

    if sell_now:
        await _claim(session, listing_id, buyer_id, sold_at)

    if fields:
        with store_errors("update listing"):
            await listing_db.update_listing_fields(session, listing_id, fields)

    return await get_listing(session, listing_id)


async def delete_listing(session: AsyncSession, listing_id: int) -> None:
    """Soft-delete a record in any state."""
    with store_errors("delete listing"):
        deleted = await listing_db.delete_listing(session, listing_id)
    if not deleted:
        raise NotFoundError("listing", listing_id)
    logger.info("Deleted listing %d", listing_id)


async def listings_for_card(session: AsyncSession, card_id: int) -> list[Listing]:
    """Open offers for a card, cheapest first."""
    await _require_card(session, card_id)
    with store_errors("listings for card"):
        db_listings = await listing_db.get_listings_for_card(session, card_id)
    return [listing_db.listing_to_model(item) for item in db_listings]


async def sales_for_card(session: AsyncSession, card_id: int) -> list[Listing]:
    """Completed sales of a card, oldest first."""
    await _require_card(session, card_id)
    with store_errors("sales for card"):
        db_listings = await listing_db.get_sales_for_card(session, card_id)
    return [listing_db.listing_to_model(item) for item in db_listings]
