"""Pydantic schemas for signup/signin endpoints."""
from pydantic import BaseModel, EmailStr, Field, field_validator


class AuthRequest(BaseModel):
    """Credentials body shared by /auth/signup and /auth/signin."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=1024)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Emails are matched case-insensitively, so store them lower-cased."""
        return v.strip().lower()


class TokenResponse(BaseModel):
    """Signin response carrying the bearer token."""

    access_token: str
    token_type: str = "bearer"  # noqa: S105
