"""SQLAlchemy database models for the provider track cache.

Defines the cached provider tracks and the library item each one resolved to,
using SQLAlchemy 2.0 typed mappings.
"""

from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    MetaData,
    String,
    UniqueConstraint,
)
from sqlalchemy.ext.asyncio import AsyncAttrs, AsyncEngine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from matchbook.config import get_logger

logger = get_logger(__name__)

# Define naming convention for constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)


class MatchbookDBBase(AsyncAttrs, DeclarativeBase):
    """Base class for all database models with timestamps."""

    metadata = metadata

    id: Mapped[int] = mapped_column(primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )


class DBProviderTrack(MatchbookDBBase):
    """Track metadata as imported from a music provider."""

    __tablename__ = "provider_tracks"

    provider_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    provider_track_id: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    album_name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    artist_names: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    album_artist_names: Mapped[list[str]] = mapped_column(
        JSON, default=list, nullable=False
    )

    __table_args__ = (UniqueConstraint("provider_id", "provider_track_id"),)


class DBProviderTrackMatch(MatchbookDBBase):
    """Library item a cached provider track resolved to."""

    __tablename__ = "provider_track_matches"

    track_id: Mapped[int] = mapped_column(
        ForeignKey("provider_tracks.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    jellyfin_item_id: Mapped[str] = mapped_column(String(64), nullable=False)
    match_level: Mapped[str] = mapped_column(String(32), nullable=False)
    match_criteria: Mapped[int] = mapped_column(nullable=False)


async def init_db(engine: AsyncEngine) -> None:
    """Create all cache tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    logger.debug("Provider track cache schema initialized")
