"""Provider track cache backed by SQLAlchemy.

Holds provider tracks keyed by ``(provider_id, provider_track_id)`` and the
library item each of them has been matched to.
"""

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from matchbook.config import get_logger
from matchbook.domain.entities import MatchCriteria, MatchLevel, ProviderTrack
from matchbook.infrastructure.persistence.database.db_connection import get_session
from matchbook.infrastructure.persistence.database.db_models import (
    DBProviderTrack,
    DBProviderTrackMatch,
)

logger = get_logger(__name__).bind(service="persistence")


def _to_domain(db_track: DBProviderTrack) -> ProviderTrack:
    return ProviderTrack(
        id=db_track.id,
        provider_id=db_track.provider_id,
        provider_track_id=db_track.provider_track_id,
        name=db_track.name,
        album_name=db_track.album_name or "",
        artist_names=list(db_track.artist_names or []),
        album_artist_names=list(db_track.album_artist_names or []),
    )


def _unmatched_filter(provider_id: str):
    has_match = exists().where(DBProviderTrackMatch.track_id == DBProviderTrack.id)
    return (DBProviderTrack.provider_id == provider_id) & ~has_match


class SqlProviderTrackCache:
    """SQL implementation of the provider track cache.

    Every call runs in its own short-lived session, so one instance can be
    shared by concurrent requests.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_track_id(self, provider_id: str, provider_track_id: str) -> int | None:
        """Internal id of a cached provider track, None if it is not cached."""
        async with get_session(self._session_factory) as session:
            return await session.scalar(
                select(DBProviderTrack.id).where(
                    DBProviderTrack.provider_id == provider_id,
                    DBProviderTrack.provider_track_id == provider_track_id,
                )
            )

    async def get_track(self, provider_id: str, track_id: int) -> ProviderTrack | None:
        """Cached provider track by internal id, None if it is not cached."""
        async with get_session(self._session_factory) as session:
            db_track = await session.scalar(
                select(DBProviderTrack).where(
                    DBProviderTrack.id == track_id,
                    DBProviderTrack.provider_id == provider_id,
                )
            )
            return _to_domain(db_track) if db_track else None

    async def upsert_track(self, track: ProviderTrack) -> ProviderTrack:
        """Insert or refresh a provider track; returns it with its internal id."""
        async with get_session(self._session_factory) as session:
            db_track = await session.scalar(
                select(DBProviderTrack).where(
                    DBProviderTrack.provider_id == track.provider_id,
                    DBProviderTrack.provider_track_id == track.provider_track_id,
                )
            )
            if db_track is None:
                db_track = DBProviderTrack(
                    provider_id=track.provider_id,
                    provider_track_id=track.provider_track_id,
                )
                session.add(db_track)

            db_track.name = track.name
            db_track.album_name = track.album_name
            db_track.artist_names = list(track.artist_names)
            db_track.album_artist_names = list(track.album_artist_names)
            await session.flush()

            return _to_domain(db_track)

    async def record_match(
        self,
        track_id: int,
        library_item_id: str,
        match_level: MatchLevel,
        match_criteria: MatchCriteria,
    ) -> None:
        """Record (or overwrite) the library item a provider track resolved to."""
        async with get_session(self._session_factory) as session:
            db_match = await session.scalar(
                select(DBProviderTrackMatch).where(
                    DBProviderTrackMatch.track_id == track_id
                )
            )
            if db_match is None:
                db_match = DBProviderTrackMatch(track_id=track_id)
                session.add(db_match)

            db_match.jellyfin_item_id = library_item_id
            db_match.match_level = match_level.value
            db_match.match_criteria = int(match_criteria)

        logger.debug(
            "Recorded provider track match",
            track_id=track_id,
            library_item_id=library_item_id,
        )

    async def list_unmatched_tracks(
        self, provider_id: str, page: int, page_size: int
    ) -> list[ProviderTrack]:
        """One page of provider tracks without a recorded match, oldest first."""
        async with get_session(self._session_factory) as session:
            result = await session.scalars(
                select(DBProviderTrack)
                .where(_unmatched_filter(provider_id))
                .order_by(DBProviderTrack.id)
                .offset((page - 1) * page_size)
                .limit(page_size)
            )
            return [_to_domain(db_track) for db_track in result]

    async def count_unmatched_tracks(self, provider_id: str) -> int:
        """Number of provider tracks without a recorded match."""
        async with get_session(self._session_factory) as session:
            count = await session.scalar(
                select(func.count(DBProviderTrack.id)).where(
                    _unmatched_filter(provider_id)
                )
            )
            return count or 0
