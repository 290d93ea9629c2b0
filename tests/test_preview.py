"""Tests for the preview widget, run headless through Textual's test pilot."""

import asyncio

from textual.app import App, ComposeResult

from mdview.document import MarkdownDocument
from mdview.widgets import Preview, SearchBar

CONTENT = (
    "# Intro\n"
    "\n"
    "First paragraph.\n"
    "\n"
    "## Intro\n"
    "\n"
    "Second paragraph mentions needle.\n"
    "\n"
    "Setext Title\n"
    "============\n"
    "\n"
    "Closing words.\n"
)


class PreviewApp(App):
    def compose(self) -> ComposeResult:
        yield Preview(id="preview")
        yield SearchBar(id="search-bar")


def run_with_document(check) -> None:
    """Show CONTENT in a headless app and run check(pilot, preview)."""

    async def scenario() -> None:
        app = PreviewApp()
        async with app.run_test(size=(80, 10)) as pilot:
            preview = app.query_one(Preview)
            await preview.show_document(MarkdownDocument("/docs/intro.md", CONTENT, ""))
            await pilot.pause()
            await check(pilot, preview)

    asyncio.run(scenario())


class TestHeadings:
    def test_headings_include_repeats_and_setext(self):
        async def check(pilot, preview):
            headings = preview.headings()
            assert [(h.level, h.text) for h in headings] == [
                (1, "Intro"),
                (2, "Intro"),
                (1, "Setext Title"),
            ]
            assert len({h.id for h in headings}) == 3

        run_with_document(check)

    def test_every_heading_is_reachable(self):
        async def check(pilot, preview):
            for heading in preview.headings():
                assert preview.goto_heading(heading.id)

        run_with_document(check)

    def test_unknown_heading(self):
        async def check(pilot, preview):
            assert not preview.goto_heading("heading-missing-1")

        run_with_document(check)

    def test_cleared_document_has_no_headings(self):
        async def check(pilot, preview):
            await preview.show_document(None)
            await pilot.pause()
            assert preview.headings() == []

        run_with_document(check)


class TestRevealLine:
    def test_marks_block_containing_line(self):
        async def check(pilot, preview):
            assert preview.reveal_line(6)
            marked = preview.query(".search-current")
            assert len(marked) == 1
            assert "needle" in marked.first().source

        run_with_document(check)

    def test_blank_line_falls_back_to_preceding_block(self):
        async def check(pilot, preview):
            assert preview.reveal_line(7)
            assert "needle" in preview.query(".search-current").first().source

        run_with_document(check)

    def test_clear_highlight(self):
        async def check(pilot, preview):
            preview.reveal_line(0)
            preview.clear_search_highlight()
            assert len(preview.query(".search-current")) == 0

        run_with_document(check)


class TestSearchBar:
    def test_typing_and_stepping_post_messages(self):
        async def scenario() -> None:
            received = []

            class RecordingApp(PreviewApp):
                def on_search_bar_query_changed(self, event: SearchBar.QueryChanged) -> None:
                    received.append(("query", event.query))

                def on_search_bar_step_requested(self, event: SearchBar.StepRequested) -> None:
                    received.append(("step", event.forward))

                def on_search_bar_closed(self, event: SearchBar.Closed) -> None:
                    received.append(("closed", None))

            app = RecordingApp()
            async with app.run_test() as pilot:
                bar = app.query_one(SearchBar)
                bar.open()
                await pilot.pause()
                assert bar.is_open

                await pilot.press("a", "b", "enter")
                await pilot.press("escape")
                await pilot.pause()

                assert not bar.is_open
                assert ("query", "ab") in received
                assert ("step", True) in received
                assert ("closed", None) in received

        asyncio.run(scenario())
