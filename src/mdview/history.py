"""Navigation history of opened documents with back/forward traversal."""

import json
import logging
import os
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

# Maximum number of files to keep in history
MAX_HISTORY_SIZE = 20

HISTORY_FILENAME = "history.json"


class HistorySaveError(Exception):
    """Raised when the history snapshot cannot be written."""


def _path_exists(path: str) -> bool:
    # Names the OS rejects outright (too long, embedded NUL) count as missing
    try:
        return Path(path).exists()
    except (OSError, ValueError):
        return False


class NavigationLog:
    """Bounded log of opened file paths with a cursor on the current one.

    Entries are ordered oldest first. Re-adding a path moves it to the end,
    the oldest entry is evicted past MAX_HISTORY_SIZE, and entries whose
    files have disappeared are pruned lazily by validate().
    """

    def __init__(
        self,
        entries: list[str] | None = None,
        cursor: int = -1,
        exists: Callable[[str], bool] = _path_exists,
    ) -> None:
        self._entries: list[str] = list(entries) if entries else []
        # -1 means empty history
        self._cursor = cursor if self._entries else -1
        self._exists = exists

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._entries)

    def current(self) -> str | None:
        """Return the entry at the cursor, or None if the log is empty."""
        if self._cursor < 0:
            return None
        return self._entries[self._cursor]

    def add(self, path: str) -> None:
        """Record a newly opened path as the current entry.

        A path already in the log is moved to the end. Entries after the
        old cursor are kept.
        """
        if path in self._entries:
            pos = self._entries.index(path)
            del self._entries[pos]
            if self._cursor > pos:
                self._cursor -= 1

        self._entries.append(path)

        if len(self._entries) > MAX_HISTORY_SIZE:
            del self._entries[0]
            if self._cursor > 0:
                self._cursor -= 1

        self._cursor = len(self._entries) - 1

    def validate(self) -> None:
        """Remove entries whose files no longer exist.

        The cursor moves left by the number of entries pruned before it, so
        it keeps pointing at the same entry (or its nearest survivor).
        """
        original_cursor = self._cursor
        present = [self._exists(path) for path in self._entries]

        removed_before = 0
        if original_cursor >= 0:
            removed_before = present[:original_cursor].count(False)

        self._entries = [
            path for path, ok in zip(self._entries, present) if ok
        ]

        if not self._entries:
            self._cursor = -1
        elif original_cursor >= 0:
            cursor = max(0, original_cursor - removed_before)
            self._cursor = min(cursor, len(self._entries) - 1)

    def previous(self) -> str | None:
        """Step back to the older entry, or return None at the start."""
        self.validate()

        if not self._entries or self._cursor <= 0:
            return None

        self._cursor -= 1
        return self._entries[self._cursor]

    def next(self) -> str | None:
        """Step forward to the newer entry, or return None at the end."""
        self.validate()

        if not self._entries or self._cursor >= len(self._entries) - 1:
            return None

        self._cursor += 1
        return self._entries[self._cursor]

    def can_go_back(self) -> bool:
        """Check the in-memory log for an entry before the cursor.

        Does not touch the filesystem, so it may be stale until the next
        validate().
        """
        return bool(self._entries) and self._cursor > 0

    def can_go_forward(self) -> bool:
        """Check the in-memory log for an entry after the cursor."""
        return bool(self._entries) and self._cursor < len(self._entries) - 1

    def move_to(self, path: str) -> bool:
        """Put the cursor on an entry already in the log, without validating.

        Returns False and leaves the cursor alone if path is not logged.
        """
        if path not in self._entries:
            return False
        self._cursor = self._entries.index(path)
        return True

    def to_dict(self) -> dict:
        return {"files": list(self._entries), "current_index": self._cursor}

    @classmethod
    def from_dict(
        cls, data: object, exists: Callable[[str], bool] = _path_exists
    ) -> "NavigationLog":
        """Build a log from snapshot data.

        Raises:
            ValueError: If the data does not have the snapshot shape.
        """
        if not isinstance(data, dict):
            raise ValueError("snapshot is not an object")

        files = data["files"]
        current_index = data["current_index"]

        if not isinstance(files, list) or not all(isinstance(f, str) for f in files):
            raise ValueError("'files' must be a list of strings")
        if isinstance(current_index, bool) or not isinstance(current_index, int):
            raise ValueError("'current_index' must be an integer")
        if current_index < -1 or (current_index == -1) != (not files):
            raise ValueError(f"'current_index' {current_index} does not match {len(files)} file(s)")
        if len(set(files)) != len(files):
            raise ValueError("'files' contains duplicates")
        if len(files) > MAX_HISTORY_SIZE:
            raise ValueError(f"'files' holds more than {MAX_HISTORY_SIZE} entries")

        return cls(files, current_index, exists=exists)

    @classmethod
    def load(
        cls, directory: Path, exists: Callable[[str], bool] = _path_exists
    ) -> "NavigationLog":
        """Load history from a directory.

        Returns an empty log if the snapshot is missing or corrupted. A
        loaded log is validated before it is returned.

        Args:
            directory: Directory holding history.json.
            exists: Existence check used by validate().
        """
        history_path = Path(directory) / HISTORY_FILENAME

        if not history_path.exists():
            return cls(exists=exists)

        try:
            contents = history_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", history_path, e)
            return cls(exists=exists)

        try:
            history = cls.from_dict(json.loads(contents), exists=exists)
        except (json.JSONDecodeError, KeyError, ValueError) as e:
            logger.warning("Failed to parse %s (corrupted): %s", history_path, e)
            return cls(exists=exists)

        history.validate()
        logger.debug("Loaded %d history entries from %s", len(history), history_path)
        return history

    def save(self, directory: Path) -> None:
        """Save history to a directory with an atomic write.

        Creates the directory if it doesn't exist.

        Raises:
            HistorySaveError: If creating the directory, serializing, or
                writing the snapshot fails.
        """
        directory = Path(directory)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise HistorySaveError(f"Failed to create config directory: {e}") from e

        try:
            contents = json.dumps(self.to_dict(), indent=2)
        except (TypeError, ValueError) as e:
            raise HistorySaveError(f"Failed to serialize history: {e}") from e

        history_path = directory / HISTORY_FILENAME
        temp_path = history_path.with_suffix(".json.tmp")
        try:
            temp_path.write_text(contents, encoding="utf-8")
            os.replace(temp_path, history_path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise HistorySaveError(f"Failed to write history file: {e}") from e
