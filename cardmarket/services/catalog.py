"""
Catalog query engine.

Paginated listing, filtered search and archetype-biased random sampling
over the card catalog.

Filters match as substrings, ignoring case and diacritics:
- name="angel" matches "Ángel of Zera"
- type="monster" matches "Effect Monster"
- archetype="eyes" matches "Blue-Eyes"

All filters are ANDed together.
"""

import logging
import math
import random
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

from sqlalchemy import ColumnElement, or_
from sqlalchemy.ext.asyncio import AsyncSession

from cardmarket.config import settings
from cardmarket.db.cards import (
    card_to_model,
    count_cards,
    get_cards_by_archetype,
    get_cards_window,
    get_random_cards,
)
from cardmarket.db.database import store_errors
from cardmarket.models.card import Card, CardPage
from cardmarket.models.db import CardDB
from cardmarket.models.failure import FailureKind, ValidationError
from cardmarket.text import normalize_search_text

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Largest page number or sample size accepted; keeps OFFSET/LIMIT within a 64-bit integer
MAX_PAGE = 2**31 - 1
MAX_SAMPLE_SIZE = 2**31 - 1


@dataclass(frozen=True, slots=True)
class PageRequest:
    """A validated pagination window."""

    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True, slots=True)
class CardFilters:
    """Optional catalog filters. None or blank means no constraint."""

    name: str | None = None
    type: str | None = None
    archetype: str | None = None


def _parse_int(value: int | str | None, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, int):
        return value
    try:
        return int(value.strip())
    except ValueError:
        return default


def parse_page_params(
    page: int | str | None = None,
    limit: int | str | None = None,
) -> PageRequest:
    """
    Build a PageRequest from raw query parameters.

    Absent or non-numeric values fall back to the configured defaults.
    Numeric values below 1 or pages past MAX_PAGE are rejected. Limit is
    clamped to max_page_size.

    Raises:
        ValidationError: If page or limit is below 1, or page exceeds MAX_PAGE
    """
    page_number = _parse_int(page, settings.default_page)
    page_size = _parse_int(limit, settings.default_page_size)

    if page_number < 1:
        raise ValidationError(
            "Page must be at least 1", field="page", kind=FailureKind.OUT_OF_RANGE
        )
    if page_number > MAX_PAGE:
        raise ValidationError(
            f"Page must not exceed {MAX_PAGE}", field="page", kind=FailureKind.OUT_OF_RANGE
        )
    if page_size < 1:
        raise ValidationError(
            "Limit must be at least 1", field="limit", kind=FailureKind.OUT_OF_RANGE
        )

    return PageRequest(page=page_number, limit=min(page_size, settings.max_page_size))


def count_pages(total_count: int, limit: int) -> int:
    """Number of pages needed to show total_count items, limit per page."""
    return math.ceil(total_count / limit)


def build_filter_criteria(filters: CardFilters) -> list[ColumnElement[bool]]:
    """Translate filters into predicates over the normalized search columns."""
    criteria: list[ColumnElement[bool]] = []
    for value, column in (
        (filters.name, CardDB.name_search),
        (filters.type, CardDB.type_search),
        (filters.archetype, CardDB.archetype_search),
    ):
        if value is None or not value.strip():
            continue
        criteria.append(column.contains(normalize_search_text(value.strip()), autoescape=True))
    return criteria


async def _page_of_cards(
    session: AsyncSession,
    criteria: list[ColumnElement[bool]],
    page_request: PageRequest,
) -> CardPage:
    with store_errors("page cards"):
        total = await count_cards(session, *criteria)
        db_cards = await get_cards_window(
            session, criteria, offset=page_request.offset, limit=page_request.limit
        )

    return CardPage(
        items=[card_to_model(c) for c in db_cards],
        total_count=total,
        total_pages=count_pages(total, page_request.limit),
        page=page_request.page,
        limit=page_request.limit,
    )


async def list_cards_page(session: AsyncSession, page_request: PageRequest) -> CardPage:
    """Get one page of the catalog, ordered by id."""
    return await _page_of_cards(session, [], page_request)


async def search_cards(
    session: AsyncSession,
    filters: CardFilters,
    page_request: PageRequest,
) -> CardPage:
    """Get one page of cards matching every supplied filter, ordered by id."""
    return await _page_of_cards(session, build_filter_criteria(filters), page_request)


def pick_without_replacement(pool: Sequence[T], count: int, rng: random.Random) -> list[T]:
    """
    Pick up to `count` distinct elements uniformly at random.

    Partial Fisher-Yates over an index array: each pick swaps the chosen
    index to the end of the live region and shrinks it, so nothing is
    rebuilt per pick. The input sequence is not modified.
    """
    indexes = list(range(len(pool)))
    picks: list[T] = []
    remaining = len(indexes)
    while remaining > 0 and len(picks) < count:
        chosen = rng.randrange(remaining)
        remaining -= 1
        indexes[chosen], indexes[remaining] = indexes[remaining], indexes[chosen]
        picks.append(pool[indexes[remaining]])
    return picks


async def random_sample(
    session: AsyncSession,
    count: int | None,
    archetype: str | None,
    rng: random.Random | None = None,
) -> list[Card]:
    """
    Draw `count` distinct cards, preferring the given archetype.

    Cards of the archetype come first, in selection order. If the archetype
    has fewer than `count` cards, the shortfall is filled with store-random
    cards of other archetypes (or none). If the archetype has no cards at
    all, the result is empty.

    Raises:
        ValidationError: If count is not a positive integer or archetype is blank
    """
    if count is None:
        raise ValidationError(
            "Count is required", field="count", kind=FailureKind.MISSING_REQUIRED
        )
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise ValidationError(
            "Count must be a positive integer", field="count", kind=FailureKind.OUT_OF_RANGE
        )
    if count > MAX_SAMPLE_SIZE:
        raise ValidationError(
            f"Count must not exceed {MAX_SAMPLE_SIZE}",
            field="count",
            kind=FailureKind.OUT_OF_RANGE,
        )
    if archetype is None or not archetype.strip():
        raise ValidationError(
            "Archetype is required", field="archetype", kind=FailureKind.MISSING_REQUIRED
        )

    rng = rng or random.Random()

    with store_errors("sample archetype"):
        pool = await get_cards_by_archetype(session, archetype)

    if not pool:
        logger.info("No cards for archetype %r; returning empty sample", archetype)
        return []

    picks = pick_without_replacement(pool, count, rng)

    shortfall = count - len(picks)
    if shortfall > 0:
        other_archetype = or_(CardDB.archetype != archetype, CardDB.archetype.is_(None))
        with store_errors("sample fallback"):
            picks.extend(await get_random_cards(session, [other_archetype], shortfall))
        logger.debug(
            "Archetype %r had %d cards; filled %d of %d from other archetypes",
            archetype,
            len(pool),
            len(picks) - len(pool),
            shortfall,
        )

    return [card_to_model(c) for c in picks]
