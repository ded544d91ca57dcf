"""Tests for domain models and failure types."""

from datetime import datetime
from decimal import Decimal

from cardmarket.models.card import UNSET, Card, CardUpdate
from cardmarket.models.failure import (
    ConflictError,
    FailureKind,
    NotFoundError,
    UnidentifiedCallerError,
    ValidationError,
)
from cardmarket.models.listing import (
    Listed,
    Listing,
    ListingStateName,
    ListingUpdate,
    Sold,
    UserRef,
)


def _card() -> Card:
    return Card(id=1, name="Kuriboh", type="Effect Monster", race="Fiend", image="/k.jpg")


class TestPartialUpdates:
    def test_supplied_excludes_unset(self) -> None:
        update = CardUpdate(name="New", archetype=None)

        assert update.supplied() == {"name": "New", "archetype": None}

    def test_empty_update(self) -> None:
        assert CardUpdate().supplied() == {}
        assert ListingUpdate().supplied() == {}

    def test_unset_is_singleton(self) -> None:
        assert ListingUpdate().buyer_id is UNSET
        assert CardUpdate().name is UNSET


class TestListingState:
    def test_listed(self) -> None:
        listing = Listing(
            id=1, card=_card(), seller=UserRef(1, "seller"), state=Listed(Decimal("2.00"))
        )

        assert listing.state.name == ListingStateName.LISTED
        assert listing.price == Decimal("2.00")
        assert listing.buyer is None
        assert listing.sold_at is None

    def test_sold(self) -> None:
        sold_at = datetime(2024, 1, 1)
        listing = Listing(
            id=1,
            card=_card(),
            seller=UserRef(1, "seller"),
            state=Sold(Decimal("2.00"), UserRef(2, "buyer"), sold_at),
        )

        assert listing.state.name == ListingStateName.SOLD
        assert listing.is_sold
        assert listing.buyer == UserRef(2, "buyer")
        assert listing.sold_at == sold_at


class TestFailures:
    def test_status_codes(self) -> None:
        assert ValidationError("bad").status_code == 400
        assert NotFoundError("card", 1).status_code == 404
        assert ConflictError("taken").status_code == 409
        assert UnidentifiedCallerError().status_code == 401

    def test_not_found_message(self) -> None:
        error = NotFoundError("card", 7)

        assert error.message == "Card 7 not found"
        assert error.kind == FailureKind.NOT_FOUND

    def test_to_detail_carries_field(self) -> None:
        detail = ValidationError("Price is required", field="price").to_detail()

        assert detail.field == "price"
        assert detail.kind == FailureKind.INVALID_INPUT
