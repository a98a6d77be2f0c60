"""Base schemas for common patterns."""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema for models read straight from ORM objects."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )
