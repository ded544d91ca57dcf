"""
SQLAlchemy ORM models for persistent storage.

Models mirror the dataclass models but add database persistence.
Rows are never hard-deleted by the application; `deleted_at` marks them inactive.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship, validates

from cardmarket.text import normalize_search_text


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class UserDB(Base):
    """
    A marketplace user.

    Identity and credentials live in an external service; this table only
    anchors the seller/buyer foreign keys on sale records.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<UserDB(id={self.id}, username={self.username})>"


class CardDB(Base):
    """
    A catalog card.

    Name, type and archetype have normalized shadow columns kept in sync on
    assignment, so case/diacritic-insensitive filters run as plain LIKE
    predicates on any backend.
    """

    __tablename__ = "cards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
    type: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    race: Mapped[str] = mapped_column(String(255))
    archetype: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    image: Mapped[str] = mapped_column(String(1024))

    name_search: Mapped[str] = mapped_column(String(255), index=True)
    type_search: Mapped[str] = mapped_column(String(255))
    archetype_search: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    listings: Mapped[list["ListingDB"]] = relationship(back_populates="card")

    @validates("name", "type", "archetype")
    def _sync_search_column(self, key: str, value: str | None) -> str | None:
        normalized = normalize_search_text(value) if value is not None else None
        setattr(self, f"{key}_search", normalized)
        return value

    def __repr__(self) -> str:
        return f"<CardDB(id={self.id}, name={self.name})>"


class ListingDB(Base):
    """
    A sale record.

    A null buyer means the card is still on offer; a buyer plus sold_at means
    the sale completed. The state is derived, never stored as its own column.
    """

    __tablename__ = "listings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    card_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("cards.id", ondelete="CASCADE"), index=True
    )
    seller_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    buyer_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    sold_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str | None] = mapped_column(String(50), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    card: Mapped["CardDB"] = relationship(back_populates="listings")
    seller: Mapped["UserDB"] = relationship(foreign_keys=[seller_id])
    buyer: Mapped["UserDB | None"] = relationship(foreign_keys=[buyer_id])

    def __repr__(self) -> str:
        return f"<ListingDB(id={self.id}, card_id={self.card_id}, buyer_id={self.buyer_id})>"
