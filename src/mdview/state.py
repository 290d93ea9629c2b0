"""Application state shared between the UI and its worker threads."""

import logging
import threading
from pathlib import Path

from .document import MarkdownDocument
from .history import HistorySaveError, NavigationLog
from .loader import MdLoadError

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """A user-facing failure of an application command."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AppState:
    """Current document and navigation history behind a single lock.

    Every method may be called from a worker thread. Document I/O happens
    outside the lock; only the history and current document are guarded.
    """

    def __init__(self, history: NavigationLog, history_directory: Path) -> None:
        self.history = history
        self.history_directory = history_directory
        self._current_document: MarkdownDocument | None = None
        self._lock = threading.Lock()

    def _load(self, path: str) -> MarkdownDocument:
        try:
            return MarkdownDocument.from_file(path)
        except MdLoadError as e:
            raise CommandError(str(e)) from e

    def open_document(self, path: str) -> MarkdownDocument:
        """Open a document and record it in the history.

        Raises:
            CommandError: If the document cannot be loaded.
        """
        document = self._load(path)
        with self._lock:
            self._current_document = document
            self.history.add(path)
        logger.info("Opened %s", path)
        return document

    def restore_current_document(self) -> MarkdownDocument | None:
        """Load the history's current entry without re-recording it.

        Returns None if the history is empty.
        """
        with self._lock:
            path = self.history.current()
        if path is None:
            return None

        document = self._load(path)
        with self._lock:
            self._current_document = document
        return document

    def reload_document(self) -> MarkdownDocument:
        """Re-read the current document from disk.

        Raises:
            CommandError: If no document is loaded or it cannot be read.
        """
        with self._lock:
            if self._current_document is None:
                raise CommandError("No document is currently loaded")
            path = self._current_document.path

        document = self._load(path)
        with self._lock:
            self._current_document = document
        return document

    def _navigate(self, forward: bool) -> MarkdownDocument | None:
        with self._lock:
            origin = self.history.current()
            path = self.history.next() if forward else self.history.previous()
        if path is None:
            return None

        try:
            document = self._load(path)
        except CommandError:
            # Keep the cursor on the document that is still displayed
            with self._lock:
                if origin is not None:
                    self.history.move_to(origin)
            raise
        with self._lock:
            self._current_document = document
        return document

    def go_back(self) -> MarkdownDocument | None:
        """Open the previous document in history, or None at the start.

        Raises:
            CommandError: If the previous document cannot be loaded.
        """
        return self._navigate(forward=False)

    def go_forward(self) -> MarkdownDocument | None:
        """Open the next document in history, or None at the end.

        Raises:
            CommandError: If the next document cannot be loaded.
        """
        return self._navigate(forward=True)

    def can_go_back(self) -> bool:
        with self._lock:
            return self.history.can_go_back()

    def can_go_forward(self) -> bool:
        with self._lock:
            return self.history.can_go_forward()

    def current_path(self) -> str | None:
        """The history entry under the cursor."""
        with self._lock:
            return self.history.current()

    def get_current_document(self) -> MarkdownDocument | None:
        with self._lock:
            return self._current_document

    def save_history(self) -> None:
        """Persist the history to the configured directory.

        Raises:
            CommandError: If the snapshot cannot be written.
        """
        with self._lock:
            try:
                self.history.save(self.history_directory)
            except HistorySaveError as e:
                logger.error("Could not save history: %s", e)
                raise CommandError(str(e)) from e
