"""Pydantic schemas for the current-user endpoints."""
from datetime import datetime

from pydantic import EmailStr, Field, field_validator, model_validator

from schemas.base import CamelModel


class UserResponse(CamelModel):
    """Public view of a user. The password hash is never included."""

    id: int
    email: str
    first_name: str | None = None
    last_name: str | None = None
    created_at: datetime
    updated_at: datetime


class UserUpdate(CamelModel):
    """Partial profile update; only fields present in the body are applied."""

    email: EmailStr | None = None
    first_name: str | None = Field(default=None, max_length=255)
    last_name: str | None = Field(default=None, max_length=255)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str | None) -> str | None:
        """Lower-case the email if provided."""
        if v is None:
            return None
        return v.strip().lower()

    @model_validator(mode="after")
    def email_not_null(self) -> "UserUpdate":
        """Email may be omitted but not cleared."""
        if "email" in self.model_fields_set and self.email is None:
            raise ValueError("email cannot be null")
        return self
