"""
User service: the identity records articles link to.

Articles only use a user for ownership filtering and for the avatar shown
on overviews, so the surface here is deliberately small.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.exceptions import NotFoundError
from catalog.models import User
from catalog.schemas import UserCreate


def _user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "display_name": user.display_name,
        "avatar": user.avatar,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


async def get_user(db: AsyncSession, user_id: int) -> dict:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User", user_id)
    return _user_to_dict(user)


async def create_user(db: AsyncSession, data: UserCreate) -> dict:
    """
    Create a user and return its dict.

    A duplicate username or email surfaces as ``IntegrityError`` at
    flush time; the router maps it to 409.
    """
    user = User(
        username=data.username,
        email=data.email,
        display_name=data.display_name,
        avatar=data.avatar,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return _user_to_dict(user)
