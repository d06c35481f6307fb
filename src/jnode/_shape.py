"""Shape classification for decoded JSON values."""

from __future__ import annotations

from enum import Enum


class Shape(Enum):
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def classify(value: object) -> Shape:
    """Return the JSON shape of *value*.

    ``bool`` is checked before numbers since it is an ``int`` subclass.
    """
    if value is None:
        return Shape.NULL
    if isinstance(value, bool):
        return Shape.BOOLEAN
    if isinstance(value, (int, float)):
        return Shape.NUMBER
    if isinstance(value, str):
        return Shape.STRING
    if isinstance(value, list):
        return Shape.ARRAY
    if isinstance(value, dict):
        return Shape.OBJECT
    raise TypeError(f"not a JSON value: {type(value).__name__}")


def is_keyed_container(value: object) -> bool:
    """True for JSON objects only; arrays and scalars are not merge targets."""
    return isinstance(value, dict)


def shape_tag(value: object) -> str:
    """Row type tag ("array", "object", "string", ...) for *value*."""
    return classify(value).value
