"""Shared pydantic base for request/response schemas."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base schema that speaks camelCase on the wire.

    Responses are serialized with camelCase keys (firstName, userId, createdAt).
    Requests accept either camelCase or snake_case field names; unknown fields
    are dropped.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )
