"""Base schema utilities."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration.

    Request bodies accept both snake_case names and the camelCase aliases
    the web client sends.
    """

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        populate_by_name=True,
    )


class CreatedAtMixin(BaseModel):
    """Mixin for created_at timestamp."""

    created_at: Optional[datetime] = None


class MessageResponse(BaseSchema):
    """Plain status/message response."""

    status: str = "success"
    message: str
