"""Node rows and their canonical text form."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from ._path import MISSING, PathError, format_path, read_path
from ._shape import Shape, classify, shape_tag

_COMPLEX_TYPES = (Shape.ARRAY.value, Shape.OBJECT.value)


@dataclass
class NodeRow:
    """One displayed field of a node.  ``key`` is None for bare values."""

    key: str | None
    value: object
    type: str

    @property
    def is_complex(self) -> bool:
        return self.type in _COMPLEX_TYPES


@dataclass
class SelectedNode:
    path: list[str | int] = field(default_factory=list)
    text: list[NodeRow] = field(default_factory=list)

    @property
    def has_complex_child(self) -> bool:
        return any(row.is_complex for row in self.text)

    @property
    def is_scalar_leaf(self) -> bool:
        return len(self.text) == 1 and not self.text[0].key


def display_scalar(value: object) -> str:
    """String-coerce a value the way a bare leaf is shown (strings unquoted)."""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    # null / true / false / numbers use their JSON spelling
    return json.dumps(value)


def normalize_rows(
    rows: list[NodeRow] | None, indent: int = 2, ensure_ascii: bool = False
) -> str:
    """Canonical text for a node's rows.

    - no rows: ``{}``
    - one keyless row: the raw value, strings unquoted
    - otherwise: a JSON object of the scalar rows only; array/object rows
      and keyless rows are left out
    """
    if not rows:
        return "{}"
    if len(rows) == 1 and not rows[0].key:
        return display_scalar(rows[0].value)

    obj: dict[str, object] = {}
    for row in rows:
        if row.is_complex:
            continue
        if row.key:
            obj[row.key] = row.value
    return json.dumps(obj, indent=indent, ensure_ascii=ensure_ascii)


def rows_for_value(value: object) -> list[NodeRow]:
    """Build the immediate rows of a subtree (children are not expanded)."""
    shape = classify(value)
    if shape is Shape.OBJECT:
        return [
            NodeRow(key, child, shape_tag(child)) for key, child in value.items()
        ]
    if shape is Shape.ARRAY:
        return [NodeRow(None, child, shape_tag(child)) for child in value]
    return [NodeRow(None, value, shape.value)]


def select_node(root: object, path: list[str | int]) -> SelectedNode:
    """Return the node at *path* in *root*."""
    value = read_path(root, path)
    if value is MISSING:
        raise PathError(f"no value at {format_path(path)}")
    return SelectedNode(path=list(path), text=rows_for_value(value))
