"""
Caller identity.

Authentication happens upstream; requests arrive with the authenticated
user's id in the X-User-Id header. Mutating routes require it.
"""

from typing import Annotated

from fastapi import Header

from cardmarket.api.schemas import MAX_ROW_ID
from cardmarket.models.failure import UnidentifiedCallerError


async def require_caller(
    x_user_id: Annotated[int | None, Header(le=MAX_ROW_ID)] = None,
) -> int:
    """Return the caller's user id, or fail with 401 if none was sent."""
    if x_user_id is None:
        raise UnidentifiedCallerError()
    return x_user_id
