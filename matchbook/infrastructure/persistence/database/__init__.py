"""Provider track cache database layer."""

from .db_connection import create_db_engine, get_session, get_session_factory
from .db_models import DBProviderTrack, DBProviderTrackMatch, init_db

__all__ = [
    "DBProviderTrack",
    "DBProviderTrackMatch",
    "create_db_engine",
    "get_session",
    "get_session_factory",
    "init_db",
]
