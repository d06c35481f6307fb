"""Commit protocol and edit-session state machine for a selected node."""

from __future__ import annotations

import json
import logging
from enum import Enum, auto
from typing import Callable

from ._merge import MergeAction, apply_merge, decide
from ._node import SelectedNode, normalize_rows
from ._path import format_path, read_path, write_path
from ._shape import Shape
from .config import EditorConfig
from .errors import (
    ApplyFailed,
    DocumentCorrupt,
    EditError,
    InvalidJsonForComplexNode,
    NoNodeSelected,
)
from .store import DocumentStore

_LOG = logging.getLogger(__name__)


def _reject_constant(name: str) -> object:
    raise ValueError(f"{name} is not valid JSON")


def loads_strict(text: str) -> object:
    """``json.loads`` without the NaN/Infinity extensions."""
    return json.loads(text, parse_constant=_reject_constant)


def parse_draft(draft: str, node: SelectedNode, config: EditorConfig) -> object:
    """Turn the draft text into the value to commit.

    Unparseable text is committed as a raw string unless the node has
    object/array children.
    """
    if (
        config.preserve_string_leaves
        and node.is_scalar_leaf
        and node.text[0].type == Shape.STRING.value
    ):
        return draft

    try:
        return loads_strict(draft)
    except (ValueError, RecursionError) as exc:
        if node.has_complex_child:
            raise InvalidJsonForComplexNode() from exc
        _LOG.debug("draft for %s is not JSON, using raw text", format_path(node.path))
        return draft


def commit_edit(
    draft: str,
    node: SelectedNode | None,
    store: DocumentStore,
    config: EditorConfig | None = None,
) -> str:
    """Apply *draft* to *node* in the store's document; return the new text.

    The snapshot is read from *store* on every call.  The store is written
    only after the whole new document has been serialized.
    """
    if node is None:
        raise NoNodeSelected()
    config = config or EditorConfig()
    new_value = parse_draft(draft, node, config)

    try:
        try:
            root = loads_strict(store.get_current_text())
        except ValueError as exc:
            raise DocumentCorrupt() from exc

        original = read_path(root, node.path)
        action = decide(original, new_value)
        _LOG.debug("%s %s", action.name.lower(), format_path(node.path))
        if action is MergeAction.MERGE:
            apply_merge(original, new_value)
            new_root = root
        else:
            new_root = write_path(root, node.path, new_value)

        new_text = json.dumps(new_root, allow_nan=False, **config.dumps_kwargs())
        store.set_text(new_text, dirty=True)
    except EditError:
        raise
    except Exception as exc:
        raise ApplyFailed() from exc

    _LOG.info("committed edit at %s", format_path(node.path))
    return new_text


class EditState(Enum):
    VIEWING = auto()
    EDITING = auto()
    ERROR_SHOWN = auto()  # still editing, draft kept


class EditSession:
    """Viewing/editing state for the node shown in a dialog.

    Changing the selection or opening/closing the dialog resets the draft
    and error.  A successful save calls ``on_saved`` so the host can close
    its dialog.
    """

    def __init__(
        self,
        store: DocumentStore,
        config: EditorConfig | None = None,
        on_saved: Callable[[], None] | None = None,
    ) -> None:
        self.store = store
        self.config: EditorConfig = config or EditorConfig()
        self.on_saved = on_saved
        self.node: SelectedNode | None = None
        self.state: EditState = EditState.VIEWING
        self.draft: str = ""
        self.error: str | None = None

    def _reset(self) -> None:
        self.state = EditState.VIEWING
        self.draft = ""
        self.error = None

    @property
    def editing(self) -> bool:
        return self.state in (EditState.EDITING, EditState.ERROR_SHOWN)

    # -- Lifecycle ---------------------------------------------------------

    def select(self, node: SelectedNode | None) -> None:
        self.node = node
        self._reset()

    def dialog_opened(self) -> None:
        self._reset()

    def dialog_closed(self) -> None:
        self._reset()

    # -- Display -----------------------------------------------------------

    def content_text(self) -> str:
        rows = self.node.text if self.node else []
        return normalize_rows(
            rows, indent=self.config.indent, ensure_ascii=self.config.ensure_ascii
        )

    def path_text(self) -> str:
        return format_path(self.node.path if self.node else None)

    # -- Editing -----------------------------------------------------------

    def begin_edit(self) -> str:
        """Enter editing with the draft seeded from the node's text."""
        if self.node is None:
            raise NoNodeSelected()
        self.draft = self.content_text()
        self.error = None
        self.state = EditState.EDITING
        return self.draft

    def update_draft(self, text: str) -> None:
        self.draft = text

    def cancel(self) -> None:
        self._reset()

    def attempt_save(self, draft: str | None = None) -> bool:
        """Commit the draft.  On failure the message is kept in ``error``."""
        if draft is not None:
            self.draft = draft
        try:
            commit_edit(self.draft, self.node, self.store, self.config)
        except EditError as exc:
            _LOG.debug("save failed: %s", exc.message, exc_info=exc)
            self.error = exc.message
            self.state = EditState.ERROR_SHOWN
            return False

        self._reset()
        if self.on_saved is not None:
            self.on_saved()
        return True
