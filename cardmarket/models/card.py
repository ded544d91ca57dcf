from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any


class _Unset:
    """Marker for a field the caller did not supply."""

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


@dataclass(frozen=True, slots=True)
class Card:
    """
    A catalog card.

    Attributes:
        id: System-assigned identifier
        name: Card name (e.g., "Blue-Eyes White Dragon")
        type: Card type line (e.g., "Normal Monster", "Spell Card")
        race: Race or category (e.g., "Dragon", "Quick-Play")
        image: Image reference (path or URL)
        description: Card text, if any
        archetype: Archetype the card belongs to, None if it has none
    """

    id: int
    name: str
    type: str
    race: str
    image: str
    description: str | None = None
    archetype: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class CardCreate:
    """Fields for a new card. Required fields may be None so validation can report them."""

    name: str | None = None
    type: str | None = None
    race: str | None = None
    image: str | None = None
    description: str | None = None
    archetype: str | None = None


@dataclass(frozen=True, slots=True)
class CardUpdate:
    """
    Partial update for a card.

    Fields left as UNSET keep their stored value; fields explicitly set to
    None clear the stored value (only allowed for optional fields).
    """

    name: str | None = UNSET
    type: str | None = UNSET
    race: str | None = UNSET
    image: str | None = UNSET
    description: str | None = UNSET
    archetype: str | None = UNSET

    def supplied(self) -> dict[str, Any]:
        """Return only the fields the caller actually supplied."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        return {name: value for name, value in values.items() if value is not UNSET}


@dataclass
class CardPage:
    """One window of a paginated card query."""

    items: list[Card] = field(default_factory=list)
    total_count: int = 0
    total_pages: int = 0
    page: int = 1
    limit: int = 10
