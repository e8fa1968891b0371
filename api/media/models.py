"""
Models for the Media API
"""

import uuid
from datetime import datetime
from typing import Any, List
from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON
from pydantic import ConfigDict


class MediaItem(SQLModel, table=True):
    """
    An uploaded media file.

    `file` is stored relative to the upload directory when the file lives
    under it, and as an absolute path otherwise. It may be empty for
    records that have no attached file.
    """

    id: uuid.UUID | None = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str = Field(max_length=255)
    file: str | None = Field(default=None, max_length=1024)
    mime_type: str | None = Field(default=None, max_length=100)
    # {"file": ..., "filesize": ..., "sizes": {label: {"file": base name, ...}}}
    attachment_metadata: dict[str, Any] | None = Field(
        default=None, sa_column=Column(JSON)
    )
    upload_date: datetime = Field(default_factory=datetime.utcnow)

    model_config = ConfigDict(from_attributes=True)


class UploadRequest(SQLModel):
    """
    An incoming upload as seen by the upload_prefilter hook.
    Only `name` is expected to change between filters.
    """

    name: str
    type: str | None = None
    tmp_name: str | None = None
    size: int = 0
    error: int = 0


class MediaItemPublic(SQLModel):
    """Public media item representation"""

    id: uuid.UUID
    title: str
    file: str | None
    mime_type: str | None
    attachment_metadata: dict[str, Any] | None
    upload_date: datetime


class MediaItemsPublic(SQLModel):
    """Paginated media listing"""

    data: List[MediaItemPublic]
    total_items: int
    total_pages: int
    current_page: int
    per_page: int
    has_next: bool
    has_prev: bool


class MediaUrlPublic(SQLModel):
    id: uuid.UUID
    url: str


class MediaLinkPublic(SQLModel):
    id: uuid.UUID
    link: str
