"""Dialog showing a selected node's content and path, with inline editing."""

from __future__ import annotations

from rich.syntax import Syntax
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static, TextArea

from .engine import EditSession


class NodeModal(ModalScreen[bool]):
    """Modal for one node.  Dismisses with ``True`` after a successful save."""

    DEFAULT_CSS = """
    NodeModal {
        align: center middle;
    }
    #node-dialog {
        width: auto;
        min-width: 50;
        max-width: 100;
        height: auto;
        max-height: 90%;
        padding: 0 1;
        border: thick $accent;
        background: $surface;
    }
    #node-header, #edit-buttons {
        height: auto;
    }
    #node-header Static {
        width: 1fr;
        padding: 1 0 0 0;
    }
    #edit-buttons {
        align-horizontal: right;
    }
    #node-content, #node-path {
        max-height: 15;
        overflow-y: auto;
        background: $panel;
    }
    #node-draft {
        height: 12;
    }
    #node-error {
        height: auto;
    }
    .section-title {
        text-style: bold;
        padding-top: 1;
    }
    """

    BINDINGS = [("escape", "close", "Close")]

    def __init__(self, session: EditSession, **kwargs) -> None:
        super().__init__(**kwargs)
        self.session = session
        self.session.on_saved = self._on_saved

    def compose(self) -> ComposeResult:
        with Vertical(id="node-dialog"):
            with Horizontal(id="node-header"):
                yield Static("Content", classes="section-title")
                yield Button("Edit", id="node-edit", variant="primary")
                yield Button("✕", id="node-close", variant="error")
            yield Static(id="node-content")
            yield TextArea(id="node-draft")
            with Horizontal(id="edit-buttons"):
                yield Button("Cancel", id="node-cancel")
                yield Button("Save", id="node-save", variant="success")
            yield Static(id="node-error")
            yield Static("JSON Path", classes="section-title")
            yield Static(id="node-path")

    def on_mount(self) -> None:
        self.session.dialog_opened()
        self._sync()

    # -- Rendering ---------------------------------------------------------

    def _sync(self) -> None:
        """Show or hide widgets for the session's current state."""
        editing = self.session.editing
        self.query_one("#node-content", Static).update(
            Syntax(self.session.content_text(), "json", word_wrap=True)
        )
        self.query_one("#node-path", Static).update(
            Syntax(self.session.path_text(), "json", word_wrap=True)
        )
        self.query_one("#node-content").display = not editing
        self.query_one("#node-draft").display = editing
        self.query_one("#edit-buttons").display = editing
        self.query_one("#node-edit").display = (
            not editing and not self.session.config.read_only
        )

        error = self.query_one("#node-error", Static)
        if self.session.error:
            error.update(Text(self.session.error, style="bold red"))
            error.display = True
        else:
            error.update("")
            error.display = False

    # -- Event handlers ----------------------------------------------------

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "node-close":
            self.action_close()
        elif button_id == "node-edit":
            self._start_edit()
        elif button_id == "node-cancel":
            self.session.cancel()
            self._sync()
        elif button_id == "node-save":
            draft = self.query_one("#node-draft", TextArea).text
            if not self.session.attempt_save(draft):
                self._sync()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self.session.editing:
            self.session.update_draft(event.text_area.text)

    def _start_edit(self) -> None:
        draft = self.session.begin_edit()
        text_area = self.query_one("#node-draft", TextArea)
        text_area.load_text(draft)
        self._sync()
        text_area.focus()

    def _on_saved(self) -> None:
        self.dismiss(True)

    def action_close(self) -> None:
        self.dismiss(False)
