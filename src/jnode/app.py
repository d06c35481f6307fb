"""Tree browser for a JSON document with a per-node edit dialog."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, Static, Tree
from textual.widgets.tree import TreeNode

from ._node import display_scalar, select_node
from ._path import PathError
from .config import EditorConfig
from .engine import EditSession, loads_strict
from .modal import NodeModal
from .store import MemoryDocumentStore

_LOG = logging.getLogger(__name__)

SAMPLE_JSON = """\
{
  "name": "jnode",
  "version": "1.0.0",
  "description": "Edit one node of a JSON document",
  "features": [
    "tree view",
    "node dialog",
    "shallow merge"
  ],
  "config": {
    "theme": "dark",
    "indent_size": 2,
    "auto_format": true,
    "nested": {
      "deep": {
        "value": null
      }
    }
  },
  "scores": [100, 200, 300]
}"""


def node_label(key: str | int | None, value: object) -> str:
    """Tree label for a child: ``key {n}``, ``key [n]`` or ``key: value``."""
    prefix = "" if key is None else f"{key}"
    if isinstance(value, dict):
        return f"{prefix} {{{len(value)}}}".strip()
    if isinstance(value, list):
        return f"{prefix} [{len(value)}]".strip()
    shown = display_scalar(value)
    if isinstance(value, str):
        shown = f'"{shown}"'
    return f"{prefix}: {shown}" if prefix else shown


class NodeEditorApp(App):
    """Browse a document as a tree; Enter on a node opens its dialog."""

    CSS = """
    Screen {
        layout: vertical;
    }
    #document {
        height: 1fr;
        border: solid $accent;
    }
    #status {
        height: 1;
        padding: 0 1;
        color: $text-muted;
        background: $surface;
    }
    """

    TITLE = "JSON Node Editor"
    BINDINGS = [
        ("ctrl+s", "save_file", "Save"),
        ("q", "quit", "Quit"),
    ]
    ENABLE_COMMAND_PALETTE = False

    def __init__(
        self,
        store: MemoryDocumentStore,
        config: EditorConfig | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.store = store
        self.config: EditorConfig = config or EditorConfig()
        self.session = EditSession(store, self.config)
        self._unsubscribe = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Tree("$", data=[], id="document")
        yield Static(id="status")
        yield Footer()

    def on_mount(self) -> None:
        self._unsubscribe = self.store.subscribe(self._on_document_changed)
        self._rebuild_tree()
        self._update_title()
        self.query_one("#document").focus()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()

    def _update_title(self) -> None:
        ro = " [RO]" if self.config.read_only else ""
        modified = " [+]" if self.store.dirty else ""
        name = self.store.file_path or "[new]"
        self.sub_title = name + modified + ro

    def _set_status(self, message: str) -> None:
        self.query_one("#status", Static).update(message)

    # -- Tree --------------------------------------------------------------

    def _rebuild_tree(self) -> None:
        tree = self.query_one("#document", Tree)
        tree.reset("$", data=[])
        try:
            root = loads_strict(self.store.get_current_text())
        except ValueError as exc:
            self._set_status(f"Invalid JSON: {exc}")
            return
        tree.root.set_label(f"$ {node_label(None, root)}")
        self._add_children(tree.root, root, [])
        tree.root.expand()
        self._set_status("")

    def _add_children(
        self, parent: TreeNode, value: object, path: list[str | int]
    ) -> None:
        if isinstance(value, dict):
            items = list(value.items())
        elif isinstance(value, list):
            items = list(enumerate(value))
        else:
            return
        for key, child in items:
            child_path = path + [key]
            label = node_label(key, child)
            if isinstance(child, (dict, list)):
                node = parent.add(label, data=child_path)
                self._add_children(node, child, child_path)
            else:
                parent.add_leaf(label, data=child_path)

    def _on_document_changed(self, text: str) -> None:
        self._rebuild_tree()
        self._update_title()

    # -- Event handlers ----------------------------------------------------

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        path = event.node.data
        if path is None:
            return
        try:
            root = loads_strict(self.store.get_current_text())
            node = select_node(root, path)
        except (ValueError, PathError) as exc:
            self.notify(f"Cannot open node: {exc}", severity="error", timeout=6)
            return
        self.session.select(node)
        self.push_screen(NodeModal(self.session), self._on_modal_closed)

    def _on_modal_closed(self, saved: bool | None) -> None:
        path = self.session.path_text()
        self.session.dialog_closed()
        if saved:
            self.notify(f"Updated {path}", severity="information")
            _LOG.info("node %s updated from dialog", path)
        self.query_one("#document").focus()

    def action_save_file(self) -> None:
        if self.config.read_only:
            self.notify("Read-only: file not written", severity="warning")
            return
        if not self.store.file_path:
            self.notify("No file name: start with a file argument", severity="warning")
            return
        try:
            saved_path = self.store.save()
        except (OSError, UnicodeError) as exc:
            self.notify(f"Save failed: {exc}", severity="error", timeout=6)
            return
        self._update_title()
        self.notify(f"Saved: {saved_path}", severity="information")


def _configure_logging(log_file: str, level: str) -> None:
    # file only, the TUI owns the terminal
    if not log_file:
        logging.getLogger("jnode").addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="jnode",
        description="Browse a JSON document and edit single nodes",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="",
        help="JSON file to open",
    )
    parser.add_argument(
        "-R", "--read-only",
        action="store_true",
        default=False,
        help="open in read-only mode (no node edits, no file writes)",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="indent used when writing the document back (default: 2)",
    )
    parser.add_argument(
        "--preserve-string-leaves",
        action="store_true",
        default=False,
        help="keep edited string leaves as strings even if the text is valid JSON",
    )
    parser.add_argument("--log-file", default="", help="write logs to this file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="log level for --log-file (default: INFO)",
    )
    args = parser.parse_args()
    _configure_logging(args.log_file, args.log_level)

    file_path: str = args.file
    store = MemoryDocumentStore(SAMPLE_JSON)
    if file_path:
        try:
            if Path(file_path).exists():
                store = MemoryDocumentStore.from_file(file_path)
            else:
                # new file starts as an empty object
                store = MemoryDocumentStore("{}", file_path=file_path)
        except (OSError, UnicodeDecodeError) as exc:
            print(f"jnode: {exc}", file=sys.stderr)
            sys.exit(1)

    config = EditorConfig(
        indent=args.indent,
        preserve_string_leaves=args.preserve_string_leaves,
        read_only=args.read_only,
    )
    _LOG.info("opened %s", file_path or "sample document")
    app = NodeEditorApp(store, config)
    app.run()


if __name__ == "__main__":
    main()
