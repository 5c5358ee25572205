"""Pydantic schemas for bookmark endpoints."""
from datetime import datetime

from pydantic import (
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from schemas.base import CamelModel


MAX_TITLE_LENGTH = 500
MAX_DESCRIPTION_LENGTH = 2000

_http_url = TypeAdapter(HttpUrl)


def validate_link(link: str) -> str:
    """
    Check that a link is a well-formed http(s) URL.

    HttpUrl is only used for validation: it normalizes root domains with a
    trailing slash (example.com -> example.com/), so the submitted string is
    what gets stored.
    """
    link = link.strip()
    try:
        _http_url.validate_python(link)
    except ValidationError:
        raise ValueError(f"Invalid link: '{link}'. Use a full http(s) URL.") from None
    return link


def strip_whitespace(value: object) -> object:
    """Trim surrounding whitespace from strings; other values pass through."""
    return value.strip() if isinstance(value, str) else value


class BookmarkCreate(CamelModel):
    """Schema for creating a new bookmark."""

    title: str = Field(min_length=1, max_length=MAX_TITLE_LENGTH)
    link: str = Field(min_length=1)
    description: str | None = Field(default=None, max_length=MAX_DESCRIPTION_LENGTH)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: object) -> object:
        """Trim the title so a blank one fails min_length."""
        return strip_whitespace(v)

    @field_validator("link")
    @classmethod
    def check_link(cls, v: str) -> str:
        """Validate link format."""
        return validate_link(v)


class BookmarkUpdate(CamelModel):
    """Schema for updating an existing bookmark."""

    title: str | None = Field(default=None, min_length=1, max_length=MAX_TITLE_LENGTH)
    link: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, max_length=MAX_DESCRIPTION_LENGTH)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: object) -> object:
        """Trim the title so a blank one fails min_length."""
        return strip_whitespace(v)

    @field_validator("link")
    @classmethod
    def check_link(cls, v: str | None) -> str | None:
        """Validate link format if provided."""
        if v is None:
            return None
        return validate_link(v)

    @model_validator(mode="after")
    def required_fields_not_null(self) -> "BookmarkUpdate":
        """title and link can be omitted but not set to null; description can be cleared."""
        for name in ("title", "link"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class BookmarkResponse(CamelModel):
    """Schema for bookmark responses."""

    id: int
    title: str
    description: str | None
    link: str
    user_id: int
    created_at: datetime
    updated_at: datetime
