"""Database models using SQLModel.

The service persists everything through a single key-value table:
- KeyValueEntry: JSON value under a string key, with optional expiry
"""

import datetime
from typing import Any

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class KeyValueEntry(SQLModel, table=True):
    """A stored JSON value.

    Keys are namespaced by purpose, e.g. ``config:{owner}`` or
    ``names:{owner}``. ``expires_at`` is epoch seconds; expired rows
    read as missing and are removed lazily.
    """

    __tablename__ = "kv_entries"

    key: str = Field(primary_key=True, max_length=512)
    value: Any = Field(default=None, sa_column=Column(JSON, nullable=True))
    expires_at: float | None = Field(default=None, index=True)
    created_at: datetime.datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime.datetime = Field(
        default_factory=_utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, onupdate=_utcnow),
    )

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and self.expires_at <= now
