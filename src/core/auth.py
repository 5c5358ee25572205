"""Bearer token authentication for protected routes."""
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings, get_settings
from core.security import decode_access_token
from db.session import get_async_session
from models.user import User
from services import user_service
from services.exceptions import AuthError

logger = logging.getLogger(__name__)


# HTTP Bearer token scheme. auto_error=False so a missing header becomes our
# own 401 instead of FastAPI's default 403.
security = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> User:
    """
    Resolve the authenticated user from the Authorization header.

    Raises:
        AuthError: If the header is missing, the token is invalid or expired,
            or the token's subject no longer exists.
    """
    if credentials is None:
        raise AuthError("Not authenticated")

    claims = decode_access_token(credentials.credentials, settings)
    try:
        user_id = int(claims["sub"])
    except ValueError:
        logger.warning("JWT subject is not a user id")
        raise AuthError("Invalid token") from None

    user = await user_service.get_user(db, user_id)
    if user is None:
        raise AuthError("User not found")

    request.state.user_id = user.id
    return user
