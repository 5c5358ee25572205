"""Signup and signin endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import check_auth_rate_limit, get_async_session, get_settings
from core.config import Settings
from schemas.auth import AuthRequest, TokenResponse
from schemas.user import UserResponse
from services import auth_service

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    dependencies=[Depends(check_auth_rate_limit)],
)


@router.post("/signup", response_model=UserResponse, status_code=201)
async def signup(
    data: AuthRequest,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> UserResponse:
    """
    Register a new user.

    Returns 400 if email or password is missing/invalid and 409 if the
    email is already registered.
    """
    user = await auth_service.signup(db, data, settings)
    return UserResponse.model_validate(user)


@router.post("/signin", response_model=TokenResponse)
async def signin(
    data: AuthRequest,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    """Exchange email and password for a bearer access token."""
    return await auth_service.signin(db, data, settings)
