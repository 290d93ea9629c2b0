"""Search bar for finding text in the open document."""

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.events import Key
from textual.message import Message
from textual.widgets import Input, Static


class SearchBar(Horizontal):
    """Hidden input row with a match counter, shown while searching."""

    DEFAULT_CSS = """
    SearchBar {
        height: 1;
        display: none;
        background: $primary-background;
    }

    SearchBar.visible {
        display: block;
    }

    SearchBar > #search-input {
        width: 1fr;
        height: 1;
        border: none;
        padding: 0 1;
    }

    SearchBar > #search-count {
        width: auto;
        min-width: 12;
        padding: 0 1;
        color: $accent;
    }
    """

    class QueryChanged(Message):
        """Message emitted when the search text changes."""

        def __init__(self, query: str) -> None:
            super().__init__()
            self.query = query

    class StepRequested(Message):
        """Message emitted to move to the next or previous match."""

        def __init__(self, forward: bool) -> None:
            super().__init__()
            self.forward = forward

    class Closed(Message):
        """Message emitted when the search bar is dismissed."""

        pass

    def compose(self) -> ComposeResult:
        yield Input(placeholder="Find in document...", id="search-input")
        yield Static("", id="search-count")

    @property
    def search_input(self) -> Input:
        return self.query_one("#search-input", Input)

    @property
    def is_open(self) -> bool:
        return self.has_class("visible")

    def open(self) -> None:
        """Show the bar and focus the input, selecting any previous query."""
        self.add_class("visible")
        search_input = self.search_input
        search_input.focus()
        search_input.select_all()

    def close(self) -> None:
        self.remove_class("visible")
        self.search_input.value = ""
        self.set_count("")
        self.post_message(self.Closed())

    def set_count(self, text: str) -> None:
        self.query_one("#search-count", Static).update(text)

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        self.post_message(self.QueryChanged(event.value))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.post_message(self.StepRequested(forward=True))

    def on_key(self, event: Key) -> None:
        """Escape closes the bar, shift+enter steps back."""
        if event.key == "escape":
            self.close()
            event.stop()
        elif event.key == "shift+enter":
            self.post_message(self.StepRequested(forward=False))
            event.stop()
