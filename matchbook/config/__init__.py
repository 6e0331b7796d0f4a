"""Configuration module for Matchbook.

Public API:
----------
settings: Settings instance
    Pydantic settings object with nested configuration

get_logger(name: str) -> Logger
    Get a context-aware logger for your module

setup_loguru_logger(verbose: bool = False) -> None
    Configure Loguru logger for the application

Usage:
------
```python
from matchbook.config import get_logger, settings

logger = get_logger(__name__)
limit = settings.search.result_limit
```
"""

from .logging import get_logger, setup_loguru_logger
from .settings import (
    DatabaseConfig,
    JellyfinConfig,
    LoggingConfig,
    MatchingConfig,
    SearchConfig,
    Settings,
    StorageConfig,
    settings,
)

__all__ = [
    "DatabaseConfig",
    "JellyfinConfig",
    "LoggingConfig",
    "MatchingConfig",
    "SearchConfig",
    "Settings",
    "StorageConfig",
    "get_logger",
    "settings",
    "setup_loguru_logger",
]
