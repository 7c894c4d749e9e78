"""Pydantic schemas for bookmark endpoints."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


MAX_TITLE_LENGTH = 500


class BookmarkCreate(BaseModel):
    """Schema for creating a new bookmark."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str | None = None
    # Any non-empty string is accepted (e.g. "facebook.com" without a scheme)
    link: str = Field(min_length=1)


class BookmarkUpdate(BaseModel):
    """
    Schema for partially updating an existing bookmark.

    Only fields present in the request body are applied. title and link may be
    omitted but not set to null, since both are required on the record.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str | None = None
    link: str | None = Field(default=None, min_length=1)

    @field_validator("title", "link")
    @classmethod
    def reject_explicit_null(cls, v: str | None) -> str:
        """Reject null for required record fields."""
        if v is None:
            raise ValueError("field cannot be null")
        return v


class BookmarkResponse(BaseModel):
    """Schema for bookmark responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    description: str | None
    link: str
    created_at: datetime
    updated_at: datetime
