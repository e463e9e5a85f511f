"""Pydantic schemas for bookmark endpoints."""
from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_TITLE_LENGTH = 500
MAX_URL_LENGTH = 2048
MAX_NOTE_LENGTH = 5000
# Ids are stored as signed 64-bit integers
MAX_BOOKMARK_ID = 2**63 - 1

BookmarkId = Annotated[int, Field(ge=1, le=MAX_BOOKMARK_ID)]


class UpdatePolicy(StrEnum):
    """How a field in a partial update is applied to the stored bookmark."""

    SKIP_IF_EMPTY = "skip_if_empty"  # empty/absent means "not provided"
    ALWAYS_OVERWRITE = "always_overwrite"  # absent is written as ""


BOOKMARK_UPDATE_POLICY: dict[str, UpdatePolicy] = {
    "title": UpdatePolicy.SKIP_IF_EMPTY,
    "url": UpdatePolicy.SKIP_IF_EMPTY,
    "note": UpdatePolicy.ALWAYS_OVERWRITE,
}


def validate_required_text(value: str) -> str:
    """Strip surrounding whitespace and reject blank values."""
    stripped = value.strip()
    if not stripped:
        raise ValueError("must not be empty")
    return stripped


class BookmarkCreate(BaseModel):
    """Schema for creating a new bookmark."""

    title: str = Field(max_length=MAX_TITLE_LENGTH)
    url: str = Field(max_length=MAX_URL_LENGTH)
    note: str | None = Field(default="", max_length=MAX_NOTE_LENGTH)

    @field_validator("title", "url")
    @classmethod
    def check_required(cls, v: str) -> str:
        """Title and URL must be non-blank."""
        return validate_required_text(v)

    @field_validator("note")
    @classmethod
    def default_note(cls, v: str | None) -> str:
        """A null note is stored as an empty string."""
        return v or ""


class BookmarkUpdate(BaseModel):
    """
    Schema for updating an existing bookmark.

    Fields are applied according to BOOKMARK_UPDATE_POLICY: an empty or missing
    title/url leaves the stored value alone, while note is always written (a
    missing note clears it).
    """

    title: str | None = Field(default=None, max_length=MAX_TITLE_LENGTH)
    url: str | None = Field(default=None, max_length=MAX_URL_LENGTH)
    note: str | None = Field(default=None, max_length=MAX_NOTE_LENGTH)

    def changes(self) -> dict[str, Any]:
        """Return the column values this update writes."""
        updates: dict[str, Any] = {}
        for field, policy in BOOKMARK_UPDATE_POLICY.items():
            value = getattr(self, field)
            if policy is UpdatePolicy.SKIP_IF_EMPTY:
                if value is not None and value.strip():
                    updates[field] = value.strip()
            else:
                updates[field] = value or ""
        return updates


class BookmarkReorder(BaseModel):
    """Schema for reordering bookmarks: ids in the desired ascending-order sequence."""

    bookmark_ids: list[BookmarkId]


class BookmarkResponse(BaseModel):
    """Schema for bookmark responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    url: str
    note: str
    order: int
    is_pinned: bool
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """SQLite returns naive datetimes; stored values are always UTC."""
        return v if v.tzinfo is not None else v.replace(tzinfo=UTC)
