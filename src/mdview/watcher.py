"""File system watcher for auto-reload of the open document."""

import logging
import os
import threading
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .loader import invalidate_file_cache

logger = logging.getLogger(__name__)


class DocumentEventHandler(FileSystemEventHandler):
    """Handler for changes to a single document with debouncing."""

    def __init__(
        self,
        path: Path,
        on_change: Callable[[Path], None],
        debounce_seconds: float = 0.5,
    ):
        super().__init__()
        self.path = path
        self.on_change = on_change
        self.debounce_seconds = debounce_seconds
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None

    def _is_watched_file(self, path: str | bytes) -> bool:
        """Check if the event path is the watched document."""
        return os.path.abspath(os.fsdecode(path)) == os.path.abspath(self.path)

    def _schedule_update(self) -> None:
        """Schedule a debounced reload of the document."""
        logger.debug("Document change detected: %s", self.path)
        with self._lock:
            if self._timer:
                self._timer.cancel()

            self._timer = threading.Timer(
                self.debounce_seconds,
                self._process_pending,
            )
            self._timer.daemon = True
            self._timer.start()

    def _process_pending(self) -> None:
        with self._lock:
            self._timer = None

        logger.info("Document changed on disk: %s", self.path)
        invalidate_file_cache(self.path)
        self.on_change(self.path)

    def cancel(self) -> None:
        """Cancel a pending reload."""
        with self._lock:
            if self._timer:
                self._timer.cancel()
                self._timer = None

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._is_watched_file(event.src_path):
            self._schedule_update()

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._is_watched_file(event.src_path):
            self._schedule_update()

    def on_moved(self, event: FileSystemEvent) -> None:
        # Editors that save via rename-into-place show up as a move
        dest_path = getattr(event, "dest_path", "")
        if not event.is_directory and dest_path and self._is_watched_file(dest_path):
            self._schedule_update()


class DocumentWatcher:
    """Watches the currently open document for changes."""

    def __init__(self, on_change: Callable[[Path], None]):
        self.on_change = on_change
        self._observer: Observer | None = None
        self._handler: DocumentEventHandler | None = None

    @property
    def watched_path(self) -> Path | None:
        return self._handler.path if self._handler else None

    def watch(self, path: Path) -> None:
        """Start watching a document, replacing any previous one."""
        path = Path(path)
        if self._handler is not None and self._handler.path == path:
            return

        self.stop()

        self._handler = DocumentEventHandler(path, self.on_change)
        self._observer = Observer()
        self._observer.schedule(
            self._handler,
            str(path.parent),
            recursive=False,
        )
        self._observer.daemon = True
        self._observer.start()
        logger.info("File watcher started: %s", path)

    def stop(self) -> None:
        """Stop watching."""
        if self._handler is not None:
            self._handler.cancel()
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=1.0)
        self._observer = None
        self._handler = None

    def __enter__(self) -> "DocumentWatcher":
        return self

    def __exit__(self, *args) -> None:
        self.stop()
