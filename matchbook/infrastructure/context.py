"""Assemble the matching collaborators from application settings.

The CLI opens one context per command; it owns the database engine and the
Jellyfin HTTP client and releases both on exit.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from attrs import define

from matchbook.application.use_cases import (
    AcceptMatchesUseCase,
    FindCandidatesUseCase,
    ReviewMatchesUseCase,
)
from matchbook.config import Settings, get_logger, settings
from matchbook.infrastructure.connectors import JellyfinLibraryIndex
from matchbook.infrastructure.persistence import (
    ManualOverrideStore,
    SqlProviderTrackCache,
    VerifiedMatchStore,
)
from matchbook.infrastructure.persistence.database import (
    create_db_engine,
    get_session_factory,
    init_db,
)

logger = get_logger(__name__)


@define(slots=True)
class MatchingServices:
    """Wired stores, cache, library index and use cases for one operation."""

    provider_cache: SqlProviderTrackCache
    library_index: JellyfinLibraryIndex
    manual_override_store: ManualOverrideStore
    verified_match_store: VerifiedMatchStore
    find_candidates: FindCandidatesUseCase
    accept_matches: AcceptMatchesUseCase
    review_matches: ReviewMatchesUseCase


def build_stores(
    app_settings: Settings,
) -> tuple[ManualOverrideStore, VerifiedMatchStore]:
    """Create both JSON stores rooted at the configured data directory."""
    storage = app_settings.storage
    return (
        ManualOverrideStore(storage.data_dir, storage.manual_map_file),
        VerifiedMatchStore(storage.data_dir, storage.verified_matches_file),
    )


@asynccontextmanager
async def open_matching_services(
    app_settings: Settings | None = None,
) -> AsyncGenerator[MatchingServices, None]:
    """Open the provider cache and library connection, yield wired services."""
    app_settings = app_settings or settings

    engine = create_db_engine(app_settings.database.url)
    try:
        await init_db(engine)
        provider_cache = SqlProviderTrackCache(get_session_factory(engine))
        manual_override_store, verified_match_store = build_stores(app_settings)

        async with JellyfinLibraryIndex(
            base_url=app_settings.jellyfin.url,
            api_key=app_settings.jellyfin.api_key,
            timeout_seconds=app_settings.jellyfin.timeout_seconds,
        ) as library_index:
            find_candidates = FindCandidatesUseCase(
                library_index=library_index,
                provider_cache=provider_cache,
                search_config=app_settings.search,
            )
            yield MatchingServices(
                provider_cache=provider_cache,
                library_index=library_index,
                manual_override_store=manual_override_store,
                verified_match_store=verified_match_store,
                find_candidates=find_candidates,
                accept_matches=AcceptMatchesUseCase(
                    provider_cache=provider_cache,
                    library_index=library_index,
                    manual_override_store=manual_override_store,
                    verified_match_store=verified_match_store,
                    matching_config_provider=lambda: app_settings.matching,
                ),
                review_matches=ReviewMatchesUseCase(
                    provider_cache=provider_cache,
                    library_index=library_index,
                    verified_match_store=verified_match_store,
                    find_candidates=find_candidates,
                ),
            )
    finally:
        await engine.dispose()
        logger.debug("Matching services closed")
