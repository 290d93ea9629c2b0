"""Tests for mdview.state module."""

import json
import os
import threading

import pytest

from mdview.history import HISTORY_FILENAME, NavigationLog
from mdview.state import AppState, CommandError


@pytest.fixture
def state(history_dir):
    return AppState(NavigationLog(), history_dir)


def corrupt(path: str) -> None:
    """Replace a file with invalid UTF-8 and bump its mtime past the cache."""
    with open(path, "wb") as f:
        f.write(b"\xff\xfe")
    stat = os.stat(path)
    os.utime(path, (stat.st_atime, stat.st_mtime + 10))


class TestOpenDocument:
    def test_open_records_history(self, state, make_docs):
        (a,) = make_docs("a.md")
        doc = state.open_document(a)
        assert doc.path == a
        assert state.get_current_document() is doc
        assert state.history.entries == [a]

    def test_open_missing_file_raises(self, state):
        with pytest.raises(CommandError, match="File not found"):
            state.open_document("/nonexistent/file.md")
        assert state.history.entries == []
        assert state.get_current_document() is None

    def test_open_invalid_utf8_raises(self, state, tmp_path):
        path = tmp_path / "bad.md"
        path.write_bytes(b"\xff\xfe")
        with pytest.raises(CommandError, match="Invalid UTF-8"):
            state.open_document(str(path))
        assert state.history.entries == []

    def test_failed_open_keeps_current_document(self, state, make_docs):
        (a,) = make_docs("a.md")
        doc = state.open_document(a)
        with pytest.raises(CommandError):
            state.open_document("/nonexistent/file.md")
        assert state.get_current_document() is doc


class TestReloadDocument:
    def test_reload_without_document(self, state):
        with pytest.raises(CommandError, match="No document is currently loaded"):
            state.reload_document()

    def test_reload_reads_new_content(self, state, make_docs):
        (a,) = make_docs("a.md")
        state.open_document(a)
        with open(a, "w", encoding="utf-8") as f:
            f.write("# Changed\n")
        stat = os.stat(a)
        os.utime(a, (stat.st_atime, stat.st_mtime + 10))

        doc = state.reload_document()
        assert doc.raw_content == "# Changed\n"
        assert state.history.entries == [a]


class TestNavigation:
    def test_back_and_forward(self, state, make_docs):
        a, b, c = make_docs("a.md", "b.md", "c.md")
        for path in (a, b, c):
            state.open_document(path)

        assert state.can_go_back()
        assert not state.can_go_forward()

        assert state.go_back().path == b
        assert state.go_back().path == a
        assert state.go_back() is None
        assert state.get_current_document().path == a

        assert state.go_forward().path == b
        assert state.get_current_document().path == b
        assert state.history.entries == [a, b, c]

    def test_forward_at_end(self, state, make_docs):
        (a,) = make_docs("a.md")
        state.open_document(a)
        assert state.go_forward() is None

    def test_back_skips_deleted_file(self, state, make_docs):
        a, b, c = make_docs("a.md", "b.md", "c.md")
        for path in (a, b, c):
            state.open_document(path)
        os.remove(b)

        assert state.go_back().path == a
        assert state.history.entries == [a, c]

    def test_restore_current_document(self, make_docs, history_dir):
        a, b = make_docs("a.md", "b.md")
        history = NavigationLog([a, b], cursor=0)
        state = AppState(history, history_dir)

        doc = state.restore_current_document()
        assert doc.path == a
        assert history.entries == [a, b]
        assert history.cursor == 0

    def test_restore_empty_history(self, state):
        assert state.restore_current_document() is None

    def test_failed_back_keeps_cursor_on_displayed_document(self, state, make_docs):
        a, b, c = make_docs("a.md", "b.md", "c.md")
        for path in (a, b, c):
            state.open_document(path)
        corrupt(b)

        with pytest.raises(CommandError, match="Invalid UTF-8"):
            state.go_back()
        assert state.history.cursor == 2
        assert state.current_path() == c
        assert state.get_current_document().path == c

    def test_failed_forward_keeps_cursor_on_displayed_document(self, state, make_docs):
        a, b = make_docs("a.md", "b.md")
        for path in (a, b):
            state.open_document(path)
        state.go_back()
        corrupt(b)

        with pytest.raises(CommandError):
            state.go_forward()
        assert state.current_path() == a
        assert state.can_go_forward()

    def test_saved_history_points_at_displayed_document(
        self, state, make_docs, history_dir
    ):
        a, b = make_docs("a.md", "b.md")
        for path in (a, b):
            state.open_document(path)
        corrupt(a)

        with pytest.raises(CommandError):
            state.go_back()
        state.save_history()
        assert NavigationLog.load(history_dir).current() == b

    def test_current_path(self, state, make_docs):
        assert state.current_path() is None
        a, b = make_docs("a.md", "b.md")
        state.open_document(a)
        state.open_document(b)
        assert state.current_path() == b
        state.go_back()
        assert state.current_path() == a


class TestSaveHistory:
    def test_save_history(self, state, make_docs, history_dir):
        (a,) = make_docs("a.md")
        state.open_document(a)
        state.save_history()

        data = json.loads((history_dir / HISTORY_FILENAME).read_text())
        assert data == {"files": [a], "current_index": 0}

    def test_save_failure_raises_command_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        state = AppState(NavigationLog(), blocker / "config")
        with pytest.raises(CommandError, match="Failed to create config directory"):
            state.save_history()


class TestConcurrency:
    def test_parallel_opens_keep_history_consistent(self, state, make_docs):
        paths = make_docs(*(f"doc{i}.md" for i in range(30)))
        threads = [
            threading.Thread(target=state.open_document, args=(path,))
            for path in paths
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        entries = state.history.entries
        assert len(entries) == 20
        assert len(set(entries)) == 20
        assert state.history.cursor == 19
