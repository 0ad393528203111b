from __future__ import annotations

"""Database model for user-created locations."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

SLUG_CONSTRAINT = "uq_locations_slug"
USER_NAME_CONSTRAINT = "uq_locations_user_name"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Location(SQLModel, table=True):
    """A named place. ``slug`` is unique across all users, ``name`` only per user."""

    __tablename__ = "locations"
    __table_args__ = (
        UniqueConstraint("slug", name=SLUG_CONSTRAINT),
        UniqueConstraint("user_id", "name", name=USER_NAME_CONSTRAINT),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    slug: str = Field(index=True)
    description: Optional[str] = Field(default=None)
    lat: float
    long: float
    user_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)
