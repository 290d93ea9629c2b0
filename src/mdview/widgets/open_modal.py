"""Open file modal with path completion."""

from pathlib import Path

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, OptionList, Static
from textual.widgets.option_list import Option

MARKDOWN_SUFFIXES = (".md", ".markdown", ".mdown", ".mkd")


def get_path_completions(partial_path: str) -> list[Path]:
    """Get directory and markdown file completions for a partial path.

    Args:
        partial_path: The partial path to complete

    Returns:
        List of matching paths, directories first
    """
    if not partial_path:
        return []

    expanded = Path(partial_path).expanduser()

    if partial_path.endswith("/") or partial_path.endswith("\\"):
        parent, prefix = expanded, ""
    else:
        parent, prefix = expanded.parent, expanded.name.lower()

    if not parent.is_dir():
        return []

    try:
        matches = [
            p for p in parent.iterdir()
            if p.name.lower().startswith(prefix)
            and not p.name.startswith(".")
            and (p.is_dir() or p.suffix.lower() in MARKDOWN_SUFFIXES)
        ]
    except PermissionError:
        return []

    matches.sort(key=lambda p: (not p.is_dir(), p.name.lower()))
    return matches[:20]  # Limit results


class OpenFileModal(ModalScreen[str | None]):
    """Modal screen asking for a markdown file to open.

    Dismisses with the entered path (with ~ expanded) or None.
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    CSS = """
    OpenFileModal {
        align: center middle;
    }

    #open-container {
        width: 70;
        height: auto;
        max-height: 24;
        background: $surface;
        border: solid $primary;
        padding: 1 2;
    }

    #open-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    .input-row {
        height: 3;
    }

    .input-row Input {
        width: 1fr;
    }

    #completion-list {
        height: auto;
        max-height: 8;
        display: none;
        background: $surface-darken-1;
        border: solid $primary-darken-1;
    }

    #completion-list.visible {
        display: block;
    }

    #completion-hint {
        color: $text-muted;
        text-style: italic;
        height: 1;
    }

    #button-row {
        margin-top: 1;
        height: 3;
        align: center middle;
    }

    #button-row Button {
        margin: 0 1;
        min-width: 12;
    }
    """

    def __init__(self, start_directory: Path) -> None:
        super().__init__()
        self.start_directory = start_directory
        self._completion_visible = False

    def compose(self) -> ComposeResult:
        with Vertical(id="open-container"):
            yield Static("OPEN FILE", id="open-title")
            yield Label("Path (Tab to complete):")
            with Horizontal(classes="input-row"):
                yield Input(
                    value=f"{self.start_directory}/",
                    id="path-input",
                    placeholder="Enter a markdown file path",
                )
            yield Static("Tab: complete, ↑↓: select, Enter: open", id="completion-hint")
            yield OptionList(id="completion-list")
            with Horizontal(id="button-row"):
                yield Button("Open", id="open-btn", variant="primary")
                yield Button("Cancel", id="cancel-btn")

    @property
    def path_input(self) -> Input:
        return self.query_one("#path-input", Input)

    def on_mount(self) -> None:
        self.path_input.focus()

    def action_cancel(self) -> None:
        """Hide completions, or close the modal."""
        if self._completion_visible:
            self._hide_completions()
        else:
            self.dismiss(None)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel-btn":
            self.dismiss(None)
        elif event.button.id == "open-btn":
            self._do_open()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if self._completion_visible:
            self._select_current_completion()
        else:
            self._do_open()

    def on_key(self, event) -> None:
        """Handle key events for tab completion."""
        completion_list = self.query_one("#completion-list", OptionList)

        if self.focused not in (self.path_input, completion_list):
            return

        if event.key == "tab":
            event.stop()
            event.prevent_default()
            if self._completion_visible:
                if completion_list.option_count == 1:
                    self._select_current_completion()
                else:
                    if completion_list.highlighted is not None:
                        next_idx = (completion_list.highlighted + 1) % completion_list.option_count
                        completion_list.highlighted = next_idx
                    completion_list.focus()
            else:
                self._show_completions()

        elif event.key == "down" and self._completion_visible:
            event.stop()
            event.prevent_default()
            completion_list.focus()
            if completion_list.highlighted is None and completion_list.option_count > 0:
                completion_list.highlighted = 0

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option_list.id == "completion-list":
            self._apply_completion(Path(str(event.option.prompt)))

    def _show_completions(self) -> None:
        completion_list = self.query_one("#completion-list", OptionList)
        completions = get_path_completions(self.path_input.value)

        completion_list.clear_options()

        if not completions:
            self.app.notify("No matching files", severity="warning")
            return

        if len(completions) == 1:
            self._apply_completion(completions[0])
            return

        for path in completions:
            completion_list.add_option(Option(str(path)))

        completion_list.add_class("visible")
        completion_list.highlighted = 0
        self._completion_visible = True

    def _hide_completions(self) -> None:
        completion_list = self.query_one("#completion-list", OptionList)
        completion_list.remove_class("visible")
        completion_list.clear_options()
        self._completion_visible = False

    def _select_current_completion(self) -> None:
        completion_list = self.query_one("#completion-list", OptionList)
        if completion_list.highlighted is not None:
            option = completion_list.get_option_at_index(completion_list.highlighted)
            self._apply_completion(Path(str(option.prompt)))

    def _apply_completion(self, path: Path) -> None:
        value = str(path)
        # Trailing slash on directories invites further completion
        if path.is_dir() and not value.endswith("/"):
            value += "/"
        self.path_input.value = value
        self.path_input.cursor_position = len(value)
        self._hide_completions()
        self.path_input.focus()

    def _do_open(self) -> None:
        value = self.path_input.value.strip()
        if not value:
            self.app.notify("Path cannot be empty", severity="error")
            return

        path = Path(value).expanduser()
        if path.is_dir():
            self.app.notify(f"Not a file: {path}", severity="error")
            return

        self.dismiss(str(path))
