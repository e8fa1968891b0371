"""
Models for persisted application settings
"""

from datetime import datetime
from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON, text


class Setting(SQLModel, table=True):
    """
    A persisted key/value setting.
    Plugins keep their state here, tagged with {"key": "plugin", "value": <name>}.
    """
    key: str = Field(primary_key=True, max_length=255)
    value: str = Field(nullable=False)
    name: str = Field(max_length=255, nullable=False)
    description: str | None = Field(default=None)
    tags: list[dict[str, str]] | None = Field(default=None, sa_column=Column(JSON))
    created_at: datetime | None = Field(default=None, sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")})
    updated_at: datetime | None = Field(default=None, sa_column_kwargs={"onupdate": text("CURRENT_TIMESTAMP")})
