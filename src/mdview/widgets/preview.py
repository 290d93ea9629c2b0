"""Markdown document preview widget."""

from textual.app import ComposeResult
from textual.containers import Vertical, VerticalScroll
from textual.css.query import NoMatches
from textual.widgets import Markdown, Static
from textual.widgets.markdown import MarkdownBlock

from ..document import MarkdownDocument, TocItem


class Preview(Vertical):
    """Widget displaying the current markdown document."""

    DEFAULT_CSS = """
    Preview {
        width: 1fr;
        height: 1fr;
    }

    Preview > #preview-header {
        background: $primary-background;
        color: $success;
        text-style: bold;
        padding: 0 1;
        height: 1;
    }

    Preview > VerticalScroll {
        height: 1fr;
    }

    Preview Markdown {
        padding: 0 1;
    }

    Preview VerticalScroll:focus {
        border: solid $accent;
    }

    Preview MarkdownBlock.search-current {
        background: $warning 30%;
    }
    """

    def compose(self) -> ComposeResult:
        yield Static("PREVIEW", id="preview-header")
        with VerticalScroll(id="preview-scroll"):
            yield Markdown(id="preview-content", open_links=False)

    @property
    def scroll_view(self) -> VerticalScroll:
        return self.query_one("#preview-scroll", VerticalScroll)

    @property
    def markdown_widget(self) -> Markdown:
        return self.query_one("#preview-content", Markdown)

    async def show_document(
        self, document: MarkdownDocument | None, keep_scroll: bool = False
    ) -> None:
        """Display a loaded document (no I/O, safe for main thread).

        Args:
            document: The document to show, or None to clear
            keep_scroll: Keep the scroll position (used when reloading)
        """
        header = self.query_one("#preview-header", Static)

        if document is None:
            header.update("PREVIEW")
            await self.markdown_widget.update("")
            return

        header.update(f"PREVIEW - {document.name}")
        scroll_y = self.scroll_view.scroll_y
        await self.markdown_widget.update(document.raw_content)
        if keep_scroll:
            self.scroll_view.scroll_to(y=scroll_y, animate=False)
        else:
            self.scroll_view.scroll_home(animate=False)

    def headings(self) -> list[TocItem]:
        """Headings of the displayed document, keyed by their block ids."""
        return [
            TocItem(level, text, block_id)
            for level, text, block_id in self.markdown_widget.table_of_contents
            if block_id is not None
        ]

    def goto_heading(self, block_id: str) -> bool:
        """Scroll to a heading block, returning False if it is not found."""
        try:
            block = self.markdown_widget.query_one(f"#{block_id}", MarkdownBlock)
        except NoMatches:
            return False
        self.scroll_view.scroll_to_widget(block, top=True)
        return True

    def _block_for_line(self, line: int) -> MarkdownBlock | None:
        """Find the top-level block rendered from a source line."""
        found = None
        for block in self.markdown_widget.query_children(MarkdownBlock):
            start, end = block.source_range
            if start > line:
                return found or block
            found = block
            if line < end:
                break
        return found

    def reveal_line(self, line: int) -> bool:
        """Scroll to and mark the block containing a source line.

        Returns False when the document has no blocks.
        """
        self.clear_search_highlight()
        block = self._block_for_line(line)
        if block is None:
            return False
        block.add_class("search-current")
        self.scroll_view.scroll_to_widget(block, center=True, animate=False)
        return True

    def clear_search_highlight(self) -> None:
        self.markdown_widget.query(".search-current").remove_class("search-current")
