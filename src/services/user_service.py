"""Service layer for the authenticated user's own profile."""
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.user import User
from schemas.user import UserUpdate
from services.exceptions import EmailAlreadyRegisteredError


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    """Get a user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def email_in_use(db: AsyncSession, email: str, exclude_user_id: int) -> bool:
    """True if another user already has this email."""
    result = await db.execute(
        select(User.id).where(User.email == email, User.id != exclude_user_id),
    )
    return result.first() is not None


async def update_user(db: AsyncSession, user: User, data: UserUpdate) -> User:
    """
    Apply a partial profile update to the given user.

    Only fields present in the request body are written. Moving to an email
    owned by someone else raises EmailAlreadyRegisteredError.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    update_data = data.model_dump(exclude_unset=True)

    new_email = update_data.get("email")
    if (
        new_email is not None
        and new_email != user.email
        and await email_in_use(db, new_email, exclude_user_id=user.id)
    ):
        raise EmailAlreadyRegisteredError(new_email)

    for field, value in update_data.items():
        setattr(user, field, value)

    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise EmailAlreadyRegisteredError(new_email or user.email) from None

    await db.refresh(user)
    return user
