"""
Card catalog maintenance.

Validates input and maps repository results to domain models and
NotFound/Validation failures.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from cardmarket.db.cards import (
    card_to_model,
    create_card,
    delete_card,
    get_card,
    list_cards,
    update_card,
)
from cardmarket.db.database import store_errors
from cardmarket.models.card import Card, CardCreate, CardUpdate
from cardmarket.models.failure import FailureKind, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

REQUIRED_CARD_FIELDS = ("name", "type", "race", "image")


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_new_card(data: CardCreate) -> None:
    """Raise ValidationError naming every missing required field."""
    missing = [name for name in REQUIRED_CARD_FIELDS if _is_blank(getattr(data, name))]
    if missing:
        raise ValidationError(
            f"Missing required card fields: {', '.join(missing)}",
            field=missing[0],
            kind=FailureKind.MISSING_REQUIRED,
        )


async def add_card(session: AsyncSession, data: CardCreate) -> Card:
    validate_new_card(data)
    with store_errors("create card"):
        db_card = await create_card(session, data)
    logger.info("Created card %d (%s)", db_card.id, db_card.name)
    return card_to_model(db_card)


async def fetch_card(session: AsyncSession, card_id: int) -> Card:
    with store_errors("read card"):
        db_card = await get_card(session, card_id)
    if db_card is None:
        raise NotFoundError("card", card_id)
    return card_to_model(db_card)


async def fetch_all_cards(session: AsyncSession) -> list[Card]:
    with store_errors("list cards"):
        db_cards = await list_cards(session)
    return [card_to_model(c) for c in db_cards]


async def edit_card(session: AsyncSession, card_id: int, changes: CardUpdate) -> Card:
    """
    Merge supplied fields over the stored card.

    At least one field must be supplied. Required fields cannot be cleared;
    description and archetype can be cleared by supplying None.
    """
    fields = changes.supplied()
    if not fields:
        raise ValidationError(
            "At least one field must be supplied to update a card",
            kind=FailureKind.MISSING_REQUIRED,
        )
    for name in REQUIRED_CARD_FIELDS:
        if name in fields and _is_blank(fields[name]):
            raise ValidationError(
                f"Card field '{name}' cannot be empty",
                field=name,
                kind=FailureKind.MISSING_REQUIRED,
            )

    with store_errors("update card"):
        db_card = await update_card(session, card_id, fields)
    if db_card is None:
        raise NotFoundError("card", card_id)
    return card_to_model(db_card)


async def remove_card(session: AsyncSession, card_id: int) -> None:
    with store_errors("delete card"):
        deleted = await delete_card(session, card_id)
    if not deleted:
        raise NotFoundError("card", card_id)
    logger.info("Deleted card %d", card_id)
