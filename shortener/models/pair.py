"""Short pair data models.

This module defines the ShortPair model storing the association between
a generated alias and the original URL it stands for.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from shortener.core.config import settings


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


class ShortPairBase(SQLModel):
    """Base model for short pair data."""

    original_url: str = Field(
        description="The original (long) URL as submitted by the client"
    )
    alias: str = Field(
        description="Randomly generated alias used in the short URL path",
        max_length=64,
        unique=True,   # Store-level guard against concurrent duplicate inserts
    )


class ShortPair(ShortPairBase, table=True):
    """
    Short pair stored in the database.

    Pairs are written once by the creation flow and never updated or
    deleted. The alias is looked up on every redirect.
    """

    __tablename__ = settings.PAIRS_TABLE_NAME

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
        description="Timestamp when this pair was created"
    )


class ShortPairCreate(ShortPairBase):
    """Schema for creating a new short pair."""
    pass
