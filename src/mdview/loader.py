"""Reading markdown files from disk as UTF-8 text."""

import threading
from collections import OrderedDict
from pathlib import Path


class MdLoadError(Exception):
    """Base error for a document that could not be loaded."""


class DocumentNotFoundError(MdLoadError):
    def __init__(self, path: str) -> None:
        super().__init__(f"File not found: {path}")
        self.path = path


class InvalidEncodingError(MdLoadError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Invalid UTF-8 encoding in file: {path}")
        self.path = path


class FileCache:
    """LRU cache for file contents with mtime-based invalidation.

    Shared between worker threads and the file watcher, so every access
    holds the lock.
    """

    def __init__(self, max_size: int = 10) -> None:
        self._cache: OrderedDict[str, tuple[float, str]] = OrderedDict()
        self._max_size = max_size
        self._lock = threading.Lock()

    def get(self, path: Path) -> str | None:
        """Get cached content if valid, or None if not cached/stale."""
        key = str(path)
        with self._lock:
            if key not in self._cache:
                return None

            cached_mtime, content = self._cache[key]

            try:
                if path.stat().st_mtime != cached_mtime:
                    del self._cache[key]
                    return None
            except OSError:
                del self._cache[key]
                return None

            self._cache.move_to_end(key)
            return content

    def put(self, path: Path, mtime: float, content: str) -> None:
        """Cache file content."""
        key = str(path)
        with self._lock:
            if len(self._cache) >= self._max_size and key not in self._cache:
                self._cache.popitem(last=False)

            self._cache[key] = (mtime, content)
            self._cache.move_to_end(key)

    def invalidate(self, path: Path) -> None:
        """Invalidate cache entry for a specific file."""
        with self._lock:
            self._cache.pop(str(path), None)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)


# Shared cache instance
_file_cache = FileCache(max_size=10)


def invalidate_file_cache(path: Path) -> None:
    """Invalidate cache for a file (call when file changes)."""
    _file_cache.invalidate(Path(path))


def load_markdown_file(path: str | Path) -> str:
    """Load a markdown file's content (can be called from worker thread).

    Args:
        path: Path to the markdown file, used as given.

    Returns:
        The decoded file content.

    Raises:
        DocumentNotFoundError: If the path does not exist.
        InvalidEncodingError: If the file is not valid UTF-8.
        MdLoadError: On any other I/O failure.
    """
    file_path = Path(path)

    if not file_path.exists():
        raise DocumentNotFoundError(str(path))

    content = _file_cache.get(file_path)
    if content is not None:
        return content

    try:
        mtime = file_path.stat().st_mtime
        data = file_path.read_bytes()
    except OSError as e:
        raise MdLoadError(f"IO error: {e}") from e

    try:
        content = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidEncodingError(str(path)) from e

    _file_cache.put(file_path, mtime, content)
    return content
