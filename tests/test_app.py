"""Tests for the node dialog and the tree app, driven without a running app."""

import json
from types import SimpleNamespace

from rich.syntax import Syntax

from jnode._node import select_node
from jnode.app import SAMPLE_JSON, NodeEditorApp, node_label
from jnode.config import EditorConfig
from jnode.engine import EditSession, EditState, loads_strict
from jnode.modal import NodeModal
from jnode.store import MemoryDocumentStore

DOC = {"config": {"theme": "dark", "nested": {"deep": 1}}, "scores": [1, 2]}


class FakeWidget:
    """Stands in for Static / Button / TextArea / containers."""

    def __init__(self):
        self.display = True
        self.renderable = None
        self.text = ""
        self.focused = False

    def update(self, renderable=""):
        self.renderable = renderable

    def load_text(self, text):
        self.text = text

    def focus(self):
        self.focused = True


class FakeTreeNode:
    def __init__(self, label="", data=None, leaf=False):
        self.label = label
        self.data = data
        self.leaf = leaf
        self.children = []
        self.expanded = False

    def add(self, label, data=None):
        node = FakeTreeNode(label, data)
        self.children.append(node)
        return node

    def add_leaf(self, label, data=None):
        node = FakeTreeNode(label, data, leaf=True)
        self.children.append(node)
        return node

    def set_label(self, label):
        self.label = label

    def expand(self):
        self.expanded = True


class FakeTree(FakeWidget):
    def __init__(self):
        super().__init__()
        self.root = FakeTreeNode("$", [])

    def reset(self, label, data=None):
        self.root = FakeTreeNode(label, data)
        return self


def _selected(path):
    return SimpleNamespace(node=SimpleNamespace(data=path))


def _press(button_id):
    return SimpleNamespace(button=SimpleNamespace(id=button_id))


class TestNodeLabel:
    """Tree labels for document children."""

    def test_object(self):
        assert node_label("config", {"a": 1, "b": 2}) == "config {2}"

    def test_array(self):
        assert node_label(0, [1, 2, 3]) == "0 [3]"

    def test_string_is_quoted(self):
        assert node_label("name", "jnode") == 'name: "jnode"'

    def test_scalars(self):
        assert node_label("n", None) == "n: null"
        assert node_label("ok", True) == "ok: true"
        assert node_label(2, 1.5) == "2: 1.5"

    def test_without_key(self):
        assert node_label(None, 5) == "5"
        assert node_label(None, {}) == "{0}"


class TestSampleDocument:
    """The bundled document used when no file is given."""

    def test_sample_is_valid_json(self):
        data = loads_strict(SAMPLE_JSON)
        assert data["config"]["nested"]["deep"]["value"] is None


class TestNodeModal:
    """Widget visibility and save/cancel flow of the node dialog."""

    SELECTORS = [
        "#node-content",
        "#node-path",
        "#node-draft",
        "#edit-buttons",
        "#node-edit",
        "#node-error",
    ]

    def _modal(self, read_only=False, path=("config",)):
        store = MemoryDocumentStore(json.dumps(DOC, indent=2))
        session = EditSession(store, EditorConfig(read_only=read_only))
        session.select(select_node(DOC, list(path)))
        modal = NodeModal(session)
        widgets = {selector: FakeWidget() for selector in self.SELECTORS}
        modal.query_one = lambda selector, *args: widgets[selector]
        dismissed = []
        modal.dismiss = dismissed.append
        modal.on_mount()
        return modal, widgets, store, dismissed

    def test_viewing_layout(self):
        modal, widgets, _, _ = self._modal()
        assert widgets["#node-content"].display
        assert widgets["#node-edit"].display
        assert not widgets["#node-draft"].display
        assert not widgets["#edit-buttons"].display
        assert not widgets["#node-error"].display

    def test_content_and_path(self):
        _, widgets, _, _ = self._modal()
        content = widgets["#node-content"].renderable
        path = widgets["#node-path"].renderable
        assert isinstance(content, Syntax)
        assert content.code == '{\n  "theme": "dark"\n}'
        assert path.code == '$["config"]'

    def test_read_only_hides_edit(self):
        _, widgets, _, _ = self._modal(read_only=True)
        assert not widgets["#node-edit"].display

    def test_edit_seeds_draft(self):
        modal, widgets, _, _ = self._modal()
        modal.on_button_pressed(_press("node-edit"))
        assert modal.session.state is EditState.EDITING
        assert widgets["#node-draft"].text == '{\n  "theme": "dark"\n}'
        assert widgets["#node-draft"].display
        assert widgets["#node-draft"].focused
        assert widgets["#edit-buttons"].display
        assert not widgets["#node-content"].display
        assert not widgets["#node-edit"].display

    def test_save_dismisses_with_true(self):
        modal, widgets, store, dismissed = self._modal()
        modal.on_button_pressed(_press("node-edit"))
        widgets["#node-draft"].text = '{"theme": "light"}'
        modal.on_button_pressed(_press("node-save"))
        assert dismissed == [True]
        config = json.loads(store.get_current_text())["config"]
        assert config == {"theme": "light", "nested": {"deep": 1}}

    def test_failed_save_shows_error(self):
        modal, widgets, store, dismissed = self._modal()
        before = store.get_current_text()
        modal.on_button_pressed(_press("node-edit"))
        widgets["#node-draft"].text = "{oops"
        modal.on_button_pressed(_press("node-save"))
        assert dismissed == []
        assert widgets["#node-error"].display
        error = widgets["#node-error"].renderable
        assert error.plain == "Invalid JSON for object/array"
        assert widgets["#node-draft"].display
        assert modal.session.draft == "{oops"
        assert store.get_current_text() == before

    def test_cancel_returns_to_viewing(self):
        modal, widgets, _, dismissed = self._modal()
        modal.on_button_pressed(_press("node-edit"))
        modal.on_button_pressed(_press("node-cancel"))
        assert modal.session.state is EditState.VIEWING
        assert widgets["#node-content"].display
        assert not widgets["#node-draft"].display
        assert dismissed == []

    def test_close_dismisses_with_false(self):
        modal, _, _, dismissed = self._modal()
        modal.on_button_pressed(_press("node-close"))
        assert dismissed == [False]

    def test_text_area_changes_tracked_while_editing(self):
        modal, _, _, _ = self._modal()
        event = SimpleNamespace(text_area=SimpleNamespace(text='{"x": 1}'))
        modal.on_text_area_changed(event)
        assert modal.session.draft == ""
        modal.on_button_pressed(_press("node-edit"))
        modal.on_text_area_changed(event)
        assert modal.session.draft == '{"x": 1}'


class TestNodeEditorApp:
    """Tree building, node selection and file saving."""

    def _app(self, text=None, read_only=False, file_path=""):
        if text is None:
            text = json.dumps(DOC, indent=2)
        store = MemoryDocumentStore(text, file_path=file_path)
        app = NodeEditorApp(store, EditorConfig(read_only=read_only))
        widgets = {"#document": FakeTree(), "#status": FakeWidget()}
        app.query_one = lambda selector, *args: widgets[selector]
        notes = []
        app.notify = lambda message, **kwargs: notes.append(
            (message, kwargs.get("severity"))
        )
        app._update_title = lambda: None
        return app, widgets, store, notes

    def test_children_carry_paths(self):
        app, _, _, _ = self._app()
        root = FakeTreeNode()
        app._add_children(root, {"a": {"b": [1]}, "c": 2}, [])
        a, c = root.children
        assert (a.label, a.data, a.leaf) == ("a {1}", ["a"], False)
        assert (c.label, c.data, c.leaf) == ("c: 2", ["c"], True)
        b = a.children[0]
        assert b.data == ["a", "b"]
        assert b.children[0].data == ["a", "b", 0]
        assert b.children[0].leaf

    def test_mount_builds_tree(self):
        app, widgets, _, _ = self._app()
        app.on_mount()
        tree = widgets["#document"]
        assert tree.root.label == "$ {2}"
        assert tree.root.expanded
        assert [child.data for child in tree.root.children] == [["config"], ["scores"]]
        assert tree.focused

    def test_tree_rebuilt_on_store_change(self):
        app, widgets, store, _ = self._app()
        app.on_mount()
        store.set_text('{"x": 1}')
        children = widgets["#document"].root.children
        assert [(child.label, child.data) for child in children] == [("x: 1", ["x"])]

    def test_unmount_stops_updates(self):
        app, widgets, store, _ = self._app()
        app.on_mount()
        app.on_unmount()
        store.set_text('{"x": 1}')
        assert len(widgets["#document"].root.children) == 2

    def test_invalid_document_status(self):
        app, widgets, _, _ = self._app(text="{bad")
        app.on_mount()
        assert widgets["#status"].renderable.startswith("Invalid JSON")
        assert widgets["#document"].root.children == []

    def test_node_selected_opens_modal(self):
        app, _, _, _ = self._app()
        pushed = []
        app.push_screen = lambda screen, callback: pushed.append((screen, callback))
        app.on_tree_node_selected(_selected(["config"]))
        screen, callback = pushed[0]
        assert isinstance(screen, NodeModal)
        assert callback == app._on_modal_closed
        assert app.session.node.path == ["config"]

    def test_missing_node_notifies(self):
        app, _, _, notes = self._app()
        app.push_screen = lambda screen, callback: None
        app.on_tree_node_selected(_selected(["nope"]))
        assert notes[0][1] == "error"
        assert app.session.node is None

    def test_modal_closed_after_save(self):
        app, widgets, _, notes = self._app()
        app.session.select(select_node(DOC, ["config"]))
        app.session.begin_edit()
        app._on_modal_closed(True)
        assert notes == [('Updated $["config"]', "information")]
        assert app.session.state is EditState.VIEWING
        assert widgets["#document"].focused

    def test_modal_closed_without_save(self):
        app, _, _, notes = self._app()
        app.session.select(select_node(DOC, ["config"]))
        app._on_modal_closed(False)
        assert notes == []

    def test_save_file(self, tmp_path):
        target = tmp_path / "doc.json"
        app, _, store, notes = self._app(text='{"a": 1}', file_path=str(target))
        store.set_text('{"a": 2}')
        app.action_save_file()
        assert target.read_text(encoding="utf-8") == '{"a": 2}'
        assert notes[-1][1] == "information"

    def test_save_without_file_name(self):
        app, _, _, notes = self._app()
        app.action_save_file()
        assert notes == [("No file name: start with a file argument", "warning")]

    def test_read_only_does_not_write(self, tmp_path):
        target = tmp_path / "doc.json"
        target.write_text("{}", encoding="utf-8")
        app, _, store, notes = self._app(
            text='{"a": 1}', read_only=True, file_path=str(target)
        )
        app.action_save_file()
        assert target.read_text(encoding="utf-8") == "{}"
        assert notes[-1][1] == "warning"

    def test_unencodable_text_reported(self, tmp_path):
        target = tmp_path / "doc.json"
        target.write_text('{"name": "x"}', encoding="utf-8")
        app, _, store, notes = self._app(
            text='{"name": "\ud800"}', file_path=str(target)
        )
        app.action_save_file()
        assert notes[-1][1] == "error"
        assert target.read_text(encoding="utf-8") == '{"name": "x"}'
