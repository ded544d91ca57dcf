"""
Import the card catalog from YGOPRODeck.

Fetches the public card list and creates one catalog card per entry.
Can be run as a standalone script or called from a scheduler.
"""

import asyncio
import logging
from typing import Any

import httpx

from cardmarket.config import settings
from cardmarket.db.cards import create_card
from cardmarket.db.database import async_session_factory, init_db
from cardmarket.models.card import CardCreate

logger = logging.getLogger(__name__)


def parse_card_entry(entry: dict[str, Any]) -> CardCreate | None:
    """
    Map one YGOPRODeck card entry to a new catalog card.

    Returns None if a required field (name, type, race, image) is missing.
    """
    images = entry.get("card_images") or []
    image = images[0].get("image_url") if images else None

    card = CardCreate(
        name=entry.get("name"),
        type=entry.get("type"),
        race=entry.get("race"),
        image=image,
        description=entry.get("desc"),
        archetype=entry.get("archetype"),
    )
    if not (card.name and card.type and card.race and card.image):
        return None
    return card


async def fetch_card_entries(
    client: httpx.AsyncClient, url: str | None = None
) -> list[dict[str, Any]]:
    """
    Download the raw card list.

    Raises:
        httpx.HTTPError: If the request fails
        ValueError: If the payload has no card list
    """
    response = await client.get(url or settings.ygoprodeck_url)
    response.raise_for_status()
    payload = response.json()

    entries = payload.get("data")
    if not isinstance(entries, list):
        raise ValueError("YGOPRODeck response has no card list")
    return entries


async def run_import(url: str | None = None) -> int:
    """
    Import every valid card from YGOPRODeck.

    Returns:
        Number of cards created
    """
    logger.info("Fetching card list from YGOPRODeck...")

    async with httpx.AsyncClient(
        headers={"User-Agent": "CardMarket/1.0"},
        follow_redirects=True,
        timeout=60.0,
    ) as client:
        entries = await fetch_card_entries(client, url)
    logger.info("Fetched %d card entries", len(entries))

    created = 0
    async with async_session_factory() as session:
        for entry in entries:
            card = parse_card_entry(entry)
            if card is None:
                logger.warning("Skipping incomplete card entry: %s", entry.get("name", "<unnamed>"))
                continue
            await create_card(session, card)
            created += 1
        await session.commit()

    logger.info("Card import complete. Created %d cards", created)
    return created


async def _main() -> None:
    await init_db()
    await run_import()


def main() -> None:
    """CLI entry point for running the catalog import."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(_main())


if __name__ == "__main__":
    main()
