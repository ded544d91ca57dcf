"""
Failure classification for catalog and marketplace operations.

Every error the core surfaces is a KnownError subclass carrying enough
structure for the HTTP layer to pick a status code and explain the failure:

- ValidationError: missing or invalid input (caller's fault, never retried)
- NotFoundError: referenced entity absent or soft-deleted
- ConflictError: a concurrent operation won the race (e.g. listing already sold)
- UnidentifiedCallerError: mutating request without a caller identity
- StoreError: opaque persistence failure, logged and surfaced generically
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    MISSING_REQUIRED = "missing_required"
    OUT_OF_RANGE = "out_of_range"

    # Resource failures
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"

    # Identity
    UNIDENTIFIED = "unidentified"

    # Persistence
    STORE_ERROR = "store_error"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    field: str | None = Field(
        default=None,
        description="Input field that violated a constraint (validation failures)",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )


class FailureResponse(BaseModel):
    """Body returned for every failed request."""

    failure: FailureDetail


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        field: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.field = field
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail."""
        return FailureDetail(
            kind=self.kind,
            message=self.message,
            field=self.field,
            detail=self.detail,
        )


class ValidationError(KnownError):
    """Invalid or missing input."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        kind: FailureKind = FailureKind.INVALID_INPUT,
        detail: str | None = None,
    ):
        super().__init__(
            kind=kind,
            message=message,
            detail=detail,
            field=field,
            status_code=400,
        )


class NotFoundError(KnownError):
    """Referenced entity does not exist or has been soft-deleted."""

    def __init__(self, entity: str, entity_id: int):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"{entity.capitalize()} {entity_id} not found",
            status_code=404,
        )


class ConflictError(KnownError):
    """The requested transition lost a race or is no longer possible."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.CONFLICT,
            message=message,
            detail=detail,
            status_code=409,
        )


class UnidentifiedCallerError(KnownError):
    """Mutating operation attempted without a caller identity."""

    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.UNIDENTIFIED,
            message="This operation requires an identified caller",
            detail="Send the caller's user id in the X-User-Id header",
            status_code=401,
        )


class StoreError(KnownError):
    """
    Opaque failure from the persistence layer.

    The message is fixed; the underlying exception is logged, never exposed.
    """

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            kind=FailureKind.STORE_ERROR,
            message="The data store failed to complete the request",
            detail=operation,
            status_code=500,
        )
