"""Main Textual application for mdview."""

import logging
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer
from textual.worker import Worker

from .config import Config
from .document import MarkdownDocument, export_html
from .history import NavigationLog
from .search import SearchResults
from .state import AppState, CommandError
from .watcher import DocumentWatcher
from .widgets import OpenFileModal, Preview, SearchBar, TocList

logger = logging.getLogger(__name__)

# Workers that produce a document to display
_DOCUMENT_WORKERS = (
    "_open_document",
    "_restore_document",
    "_reload_document",
    "_go_back",
    "_go_forward",
)


class MdviewApp(App):
    """mdview - Terminal Markdown Viewer."""

    TITLE = "mdview"
    SUB_TITLE = "Markdown Viewer"

    CSS = """
    #main-container {
        width: 100%;
        height: 1fr;
    }

    #toc-list {
        width: 25%;
        height: 100%;
        border: solid $accent;
    }

    #toc-list:focus-within {
        border: solid cyan;
    }

    #toc-list.hidden {
        display: none;
    }

    #preview {
        width: 1fr;
        height: 100%;
        border: solid $success;
    }

    #preview:focus-within {
        border: solid green;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("o", "open", "Open"),
        Binding("r", "reload", "Reload"),
        Binding("b", "go_back", "Back"),
        Binding("f", "go_forward", "Forward"),
        Binding("alt+left", "go_back", "Back", show=False),
        Binding("alt+right", "go_forward", "Forward", show=False),
        Binding("c", "toggle_toc", "Contents"),
        Binding("x", "export", "Export"),
        Binding("/", "search", "Find"),
        Binding("ctrl+f", "search", "Find", show=False),
        Binding("n", "next_match", "Next match"),
        Binding("N", "previous_match", "Previous match"),
        Binding("?", "help", "Help"),
    ]

    def __init__(
        self, config: Config, state: AppState, initial_path: str | None = None
    ) -> None:
        super().__init__()
        self.config = config
        self.state = state
        self.initial_path = initial_path
        self._watcher: DocumentWatcher | None = None
        self._search = SearchResults()

    def compose(self) -> ComposeResult:
        with Horizontal(id="main-container"):
            yield TocList(id="toc-list", classes="panel")
            yield Preview(id="preview", classes="panel")
        yield SearchBar(id="search-bar")
        yield Footer()

    async def on_mount(self) -> None:
        """Initialize the app after mounting."""
        if self.config.auto_reload:
            self._watcher = DocumentWatcher(self._on_document_change)

        self.query_one("#preview", Preview).scroll_view.focus()

        if self.initial_path:
            self._open_path(self.initial_path)
        elif self.config.restore_last_document and self.state.current_path():
            self._run_document_worker(
                self.state.restore_current_document, "_restore_document"
            )

    async def on_unmount(self) -> None:
        """Clean up when app closes."""
        if self._watcher:
            self._watcher.stop()
        try:
            self.state.save_history()
        except CommandError as e:
            logger.error("History not saved on exit: %s", e.message)

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Disable back/forward at history ends and match keys with no matches."""
        if action == "go_back":
            return True if self.state.can_go_back() else None
        if action == "go_forward":
            return True if self.state.can_go_forward() else None
        if action in ("next_match", "previous_match"):
            return True if len(self._search) else None
        return True

    def _run_document_worker(self, work, name: str) -> None:
        """Load a document in a background thread."""
        self.run_worker(
            work,
            name=name,
            thread=True,
            exclusive=True,
            group="document",
            exit_on_error=False,
        )

    def _open_path(self, path: str) -> None:
        self._run_document_worker(lambda: self.state.open_document(path), "_open_document")

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        """Handle background worker completion."""
        worker_name = event.worker.name

        if event.state.name == "ERROR":
            error = event.worker.error
            message = error.message if isinstance(error, CommandError) else str(error)
            if worker_name == "_export_html":
                self.notify(f"Export failed: {message}", severity="error")
            else:
                self.notify(message, severity="error")
            if worker_name in ("_go_back", "_go_forward"):
                self._after_navigation()
            return

        if event.state.name != "SUCCESS":
            return

        if worker_name in _DOCUMENT_WORKERS:
            document = event.worker.result
            if document is None:
                if worker_name in ("_go_back", "_go_forward"):
                    direction = "previous" if worker_name == "_go_back" else "next"
                    self.notify(f"No {direction} document in history", severity="warning")
                self.refresh_bindings()
                return

            keep_scroll = worker_name == "_reload_document"
            self.call_later(lambda: self._show_document(document, keep_scroll))
            if worker_name != "_reload_document":
                self._after_navigation()

        elif worker_name == "_export_html":
            output_path = event.worker.result
            self.notify(f"Exported to {output_path.name}", timeout=5)

    async def _show_document(self, document: MarkdownDocument, keep_scroll: bool) -> None:
        """Display a loaded document and watch it for changes."""
        preview = self.query_one("#preview", Preview)
        await preview.show_document(document, keep_scroll=keep_scroll)
        self.query_one("#toc-list", TocList).update_toc(preview.headings())
        self.sub_title = document.path
        if self._search.query:
            self._run_search(self._search.query, keep_position=keep_scroll)

        if self._watcher is not None:
            try:
                self._watcher.watch(Path(document.path))
            except OSError as e:
                logger.warning("Cannot watch %s: %s", document.path, e)

    def _after_navigation(self) -> None:
        """Refresh back/forward bindings and persist history."""
        self.refresh_bindings()
        if not self.config.save_history_on_change:
            return
        try:
            self.state.save_history()
        except CommandError as e:
            self.notify(e.message, severity="warning")

    def _on_document_change(self, path: Path) -> None:
        """Handle document changes (called from watcher thread)."""
        self.call_from_thread(self.action_reload)

    def action_open(self) -> None:
        """Prompt for a file to open."""
        current = self.state.get_current_document()
        start = Path(current.path).parent if current else self.config.open_directory

        def handle_result(path: str | None) -> None:
            if path:
                self._open_path(path)

        self.push_screen(OpenFileModal(start), handle_result)

    def action_reload(self) -> None:
        """Reload the current document from disk."""
        if self.state.get_current_document() is None:
            self.notify("No document is currently loaded", severity="warning")
            return
        self._run_document_worker(self.state.reload_document, "_reload_document")

    def action_go_back(self) -> None:
        """Open the previous document in history."""
        self._run_document_worker(self.state.go_back, "_go_back")

    def action_go_forward(self) -> None:
        """Open the next document in history."""
        self._run_document_worker(self.state.go_forward, "_go_forward")

    def action_toggle_toc(self) -> None:
        self.query_one("#toc-list", TocList).toggle_class("hidden")

    def action_export(self) -> None:
        """Export the current document to HTML."""
        document = self.state.get_current_document()
        if document is None:
            self.notify("No document is currently loaded", severity="warning")
            return
        export_dir = self.config.export_directory
        self.run_worker(
            lambda: export_html(document, export_dir),
            name="_export_html",
            thread=True,
            exit_on_error=False,
        )

    def action_search(self) -> None:
        """Show the search bar."""
        self.query_one("#search-bar", SearchBar).open()

    def action_next_match(self) -> None:
        self._step_match(forward=True)

    def action_previous_match(self) -> None:
        self._step_match(forward=False)

    def _run_search(self, query: str, keep_position: bool = False) -> None:
        """Search the displayed document and reveal the current match."""
        document = self.state.get_current_document()
        previous_index = self._search.index
        self._search = SearchResults.search(document.raw_content if document else "", query)
        if keep_position and len(self._search):
            self._search.index = min(max(previous_index, 0), len(self._search) - 1)
        self._reveal_current_match()
        self.refresh_bindings()

    def _step_match(self, forward: bool) -> None:
        if forward:
            self._search.next()
        else:
            self._search.previous()
        self._reveal_current_match()

    def _reveal_current_match(self) -> None:
        preview = self.query_one("#preview", Preview)
        match = self._search.current
        if match is None:
            preview.clear_search_highlight()
        else:
            preview.reveal_line(match.line)
        self.query_one("#search-bar", SearchBar).set_count(self._search.summary())

    def on_search_bar_query_changed(self, event: SearchBar.QueryChanged) -> None:
        self._run_search(event.query)

    def on_search_bar_step_requested(self, event: SearchBar.StepRequested) -> None:
        self._step_match(event.forward)

    def on_search_bar_closed(self, event: SearchBar.Closed) -> None:
        self._search = SearchResults()
        self.query_one("#preview", Preview).clear_search_highlight()
        self.refresh_bindings()
        self.query_one("#preview", Preview).scroll_view.focus()

    def on_toc_list_heading_selected(self, event: TocList.HeadingSelected) -> None:
        """Scroll the preview to the selected heading."""
        preview = self.query_one("#preview", Preview)
        if not preview.goto_heading(event.item.id):
            self.notify(f"Heading not found: {event.item.text}", severity="warning")

    def action_help(self) -> None:
        """Show help information."""
        self.notify(
            "o=Open, r=Reload, b/Alt+Left=Back, f/Alt+Right=Forward, c=Contents, "
            "/=Find, n/N=Next/Previous match, x=Export, q=Quit",
            timeout=5,
        )


def run_app(config: Config, initial_path: str | None = None) -> None:
    """Load the history and run the application."""
    history = NavigationLog.load(config.history_directory)
    state = AppState(history, config.history_directory)
    app = MdviewApp(config, state, initial_path)
    app.run()
