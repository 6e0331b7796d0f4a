"""Base class for small keyed collections persisted as a single JSON file.

Stores keep their entries in an insertion-ordered dict keyed by each entry's
identity. Adding an entry whose key already exists replaces the old entry
and moves it to the end, so the collection never holds two entries with the
same key.

Persistence is whole-file: ``load()`` reads the complete file and ``save()``
rewrites it. There is no dirty tracking and no locking; two processes saving
the same file concurrently will lose one of the updates, so callers must
serialize writers themselves.
"""

from abc import ABC, abstractmethod
from collections.abc import Hashable
import contextlib
import json
import os
from pathlib import Path
from typing import Any, ClassVar

from matchbook.config import get_logger

logger = get_logger(__name__).bind(service="persistence")


class JsonFileStore[K: Hashable, E](ABC):
    """In-memory keyed collection backed by an indented JSON array on disk."""

    # Human readable name of the entries, used in log messages
    label: ClassVar[str] = "entries"

    def __init__(self, data_dir: Path | str, file_name: str) -> None:
        """Initialize an empty store.

        Args:
            data_dir: Writable directory supplied by the host, created on first save
            file_name: Name of the backing file inside ``data_dir``
        """
        self._data_dir = Path(data_dir)
        self._file_path = self._data_dir / file_name
        self._entries: dict[K, E] = {}

    @property
    def file_path(self) -> Path:
        """Path of the backing file."""
        return self._file_path

    @property
    def count(self) -> int:
        """Number of entries currently held in memory."""
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    # -------------------------------------------------------------------------
    # Entry mapping, implemented by concrete stores
    # -------------------------------------------------------------------------

    @abstractmethod
    def _key(self, entry: E) -> K:
        """Identity of an entry."""

    @abstractmethod
    def _to_dict(self, entry: E) -> dict[str, Any]:
        """Serialize an entry to a JSON object."""

    @abstractmethod
    def _from_dict(self, data: dict[str, Any]) -> E:
        """Deserialize an entry, raising on malformed data."""

    # -------------------------------------------------------------------------
    # Collection operations
    # -------------------------------------------------------------------------

    def add(self, entry: E) -> None:
        """Add an entry, replacing any existing entry with the same key.

        Raises:
            ValueError: If entry is None
        """
        if entry is None:
            raise ValueError(f"Cannot add a missing entry to {self.label}")

        key = self._key(entry)
        self._entries.pop(key, None)
        self._entries[key] = entry

    def remove(self, entry: E | None) -> bool:
        """Remove an entry equal to ``entry``.

        Returns:
            True if an entry was removed, False if it was absent
        """
        if entry is None:
            return False

        key = self._key(entry)
        if key not in self._entries or self._entries[key] != entry:
            return False

        del self._entries[key]
        return True

    def _remove_key(self, key: K) -> bool:
        return self._entries.pop(key, None) is not None

    def _get(self, key: K) -> E | None:
        return self._entries.get(key)

    def get_all(self) -> list[E]:
        """Snapshot of all entries in insertion order."""
        return list(self._entries.values())

    def clear(self) -> None:
        """Remove all entries from memory; the file is untouched until save()."""
        self._entries.clear()

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> bool:
        """Replace the in-memory entries with the contents of the backing file.

        A missing file is not an error: the store keeps its current (usually
        empty) state. A file that cannot be read or parsed leaves the in-memory
        entries untouched.

        Returns:
            True if the file was absent or loaded, False if loading failed
        """
        try:
            if not self._file_path.exists():
                logger.info(
                    f"{self.label.capitalize()} file does not exist, starting with empty store",
                    path=str(self._file_path),
                )
                return True

            data = json.loads(self._file_path.read_text(encoding="utf-8"))
            if not isinstance(data, list):
                logger.warning(
                    f"Failed to deserialize {self.label} file: expected a JSON array",
                    path=str(self._file_path),
                )
                return False

            entries = [self._from_dict(item) for item in data]

        except Exception as e:
            logger.error(f"Error loading {self.label}: {e}", path=str(self._file_path))
            return False

        loaded: dict[K, E] = {}
        for entry in entries:
            key = self._key(entry)
            loaded.pop(key, None)
            loaded[key] = entry

        self._entries = loaded
        logger.info(f"Loaded {len(self._entries)} {self.label}")
        return True

    def save(self) -> bool:
        """Write every in-memory entry to the backing file.

        The data directory is created if needed. The file is written to a
        temporary sibling first and then moved into place.

        Returns:
            True if the file was written, False otherwise
        """
        temp_path = self._file_path.with_name(f"{self._file_path.name}.tmp")
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)

            payload = json.dumps(
                [self._to_dict(entry) for entry in self._entries.values()],
                indent=2,
                ensure_ascii=False,
            )
            temp_path.write_text(payload + "\n", encoding="utf-8")
            os.replace(temp_path, self._file_path)

        except Exception as e:
            logger.error(f"Error saving {self.label}: {e}", path=str(self._file_path))
            with contextlib.suppress(OSError):
                temp_path.unlink(missing_ok=True)
            return False

        logger.info(f"Saved {len(self._entries)} {self.label}")
        return True
