"""Service layer for signup and signin."""
import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.security import create_access_token, hash_password, verify_password
from models.user import User
from schemas.auth import AuthRequest, TokenResponse
from services.exceptions import EmailAlreadyRegisteredError, InvalidCredentialsError

logger = logging.getLogger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Look up a user by (already lower-cased) email."""
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def signup(db: AsyncSession, data: AuthRequest, settings: Settings) -> User:
    """
    Register a new user with a hashed password.

    Raises:
        EmailAlreadyRegisteredError: If the email already belongs to a user,
            including when a concurrent signup wins the unique index.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    if await get_user_by_email(db, data.email) is not None:
        logger.info("signup_rejected", extra={"reason": "email_taken"})
        raise EmailAlreadyRegisteredError(data.email)

    # CPU-bound; run off the event loop
    password_hash = await asyncio.to_thread(
        hash_password, data.password, settings.password_hash_iterations,
    )
    user = User(email=data.email, password_hash=password_hash)
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        # Another request registered the same email between SELECT and INSERT
        await db.rollback()
        raise EmailAlreadyRegisteredError(data.email) from None

    await db.refresh(user)
    logger.info("signup_succeeded", extra={"user_id": user.id})
    return user


async def signin(db: AsyncSession, data: AuthRequest, settings: Settings) -> TokenResponse:
    """
    Verify credentials and issue an access token.

    Unknown email and wrong password raise the same error so the response
    does not reveal which emails are registered.
    """
    user = await get_user_by_email(db, data.email)
    if user is None:
        logger.info("signin_failed", extra={"reason": "unknown_email"})
        raise InvalidCredentialsError

    matches = await asyncio.to_thread(verify_password, data.password, user.password_hash)
    if not matches:
        logger.info("signin_failed", extra={"user_id": user.id, "reason": "bad_password"})
        raise InvalidCredentialsError

    token = create_access_token(user.id, user.email, settings)
    logger.info("signin_succeeded", extra={"user_id": user.id})
    return TokenResponse(access_token=token)
