"""User reference operations (existence checks for sale record foreign keys)."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cardmarket.models.db import UserDB
from cardmarket.models.listing import UserRef


async def get_user(session: AsyncSession, user_id: int) -> UserDB | None:
    """Get an active user by id, or None."""
    result = await session.execute(
        select(UserDB).where(UserDB.id == user_id, UserDB.deleted_at.is_(None))
    )
    return result.scalar_one_or_none()


async def create_user(session: AsyncSession, username: str) -> UserDB:
    """
    Create a user row.

    Raises IntegrityError if the username is taken.
    """
    user = UserDB(username=username)
    session.add(user)
    await session.flush()
    return user


def user_to_ref(user: UserDB) -> UserRef:
    return UserRef(id=user.id, username=user.username)
