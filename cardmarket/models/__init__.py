from cardmarket.models.card import UNSET, Card, CardCreate, CardPage, CardUpdate
from cardmarket.models.failure import (
    ConflictError,
    FailureDetail,
    FailureKind,
    FailureResponse,
    KnownError,
    NotFoundError,
    StoreError,
    UnidentifiedCallerError,
    ValidationError,
)
from cardmarket.models.listing import (
    Listed,
    Listing,
    ListingState,
    ListingStateName,
    ListingUpdate,
    Sold,
    UserRef,
)

__all__ = [
    "Card",
    "CardCreate",
    "CardPage",
    "CardUpdate",
    "ConflictError",
    "FailureDetail",
    "FailureKind",
    "FailureResponse",
    "KnownError",
    "Listed",
    "Listing",
    "ListingState",
    "ListingStateName",
    "ListingUpdate",
    "NotFoundError",
    "Sold",
    "StoreError",
    "UNSET",
    "UnidentifiedCallerError",
    "UserRef",
    "ValidationError",
]
