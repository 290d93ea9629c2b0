"""Table of contents widget for the open document."""

from rich.text import Text

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.widgets import Label, ListItem, ListView, Static

from ..document import TocItem


class TocEntry(ListItem):
    """A list item representing a heading."""

    def __init__(self, item: TocItem) -> None:
        super().__init__()
        self.item = item

    def compose(self) -> ComposeResult:
        text = Text("  " * (self.item.level - 1))
        text.append(self.item.text, style="bold" if self.item.level == 1 else "")
        yield Label(text)


class TocList(Vertical):
    """Widget listing the headings of the current document."""

    DEFAULT_CSS = """
    TocList {
        width: 1fr;
        height: 1fr;
    }

    TocList > #toc-header {
        background: $primary-background;
        color: $accent;
        text-style: bold;
        padding: 0 1;
        height: 1;
    }

    TocList > #toc-list-view {
        height: 1fr;
    }

    TocList ListItem {
        padding: 0 1;
    }

    TocList ListItem.--highlight {
        background: $accent;
    }
    """

    class HeadingSelected(Message):
        """Message emitted when a heading is selected."""

        def __init__(self, item: TocItem) -> None:
            super().__init__()
            self.item = item

    def compose(self) -> ComposeResult:
        yield Static("CONTENTS", id="toc-header")
        yield ListView(id="toc-list-view")

    @property
    def list_view(self) -> ListView:
        return self.query_one("#toc-list-view", ListView)

    def update_toc(self, items: list[TocItem]) -> None:
        """Replace the listed headings."""
        list_view = self.list_view
        list_view.clear()
        for item in items:
            list_view.append(TocEntry(item))

        header = self.query_one("#toc-header", Static)
        header.update(f"CONTENTS ({len(items)})" if items else "CONTENTS")

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, TocEntry):
            self.post_message(self.HeadingSelected(event.item.item))
