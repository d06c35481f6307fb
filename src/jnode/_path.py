"""Path addressing for JSON documents.

A path is a list of segments: ``int`` for array indices, ``str`` for object
keys.  The empty path is the document root.
"""

from __future__ import annotations

import re

_INDEX_RE = re.compile(r"0|[1-9][0-9]*")


class PathError(LookupError):
    """A path cannot be applied to the document."""


class PathSyntaxError(ValueError):
    """Text is not a bracket-notation path."""


class _Missing:
    """Sentinel for a path that resolves to nothing."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def _key_for(container: object, segment: str | int) -> str | int:
    # object keys are always strings once serialized
    if isinstance(container, dict) and isinstance(segment, int):
        return str(segment)
    return segment


def _lookup(container: object, segment: str | int) -> object:
    if isinstance(container, dict):
        return container.get(_key_for(container, segment), MISSING)
    if isinstance(container, list) and isinstance(segment, int):
        if 0 <= segment < len(container):
            return container[segment]
    return MISSING


def _assign(container: object, segment: str | int, value: object) -> None:
    if isinstance(container, dict):
        container[_key_for(container, segment)] = value
        return
    if isinstance(container, list) and isinstance(segment, int) and segment >= 0:
        if segment >= len(container):
            container.extend([None] * (segment - len(container) + 1))
        container[segment] = value
        return
    raise PathError(
        f"cannot set {segment!r} on {type(container).__name__} value"
    )


def read_path(data: object, path: list[str | int]) -> object:
    """Get the value at *path* in *data*, or ``MISSING``.

    Walking stops early when a ``null`` is reached before the path is
    consumed.
    """
    current = data
    for segment in path:
        if current is None:
            return MISSING
        current = _lookup(current, segment)
        if current is MISSING:
            return MISSING
    return current


def write_path(data: object, path: list[str | int], value: object) -> object:
    """Set *value* at *path* inside *data* and return the root.

    *data* is modified in place.  Intermediate slots that are missing or of
    the wrong shape are replaced with an empty list (when the next segment
    is an int) or dict (when it is a str).  An existing object is kept for
    an int segment, which then addresses the key ``str(segment)``.  With
    an empty path the result is *value* itself; the caller must use the
    return value in that case.
    """
    if not path:
        return value

    current = data
    for segment, next_segment in zip(path[:-1], path[1:]):
        # the container kind follows the segment that will index into it
        child = _lookup(current, segment)
        if isinstance(next_segment, int):
            accepted, created = (list, dict), list
        else:
            accepted, created = dict, dict
        if not isinstance(child, accepted):
            child = created()
            _assign(current, segment, child)
        current = child

    _assign(current, path[-1], value)
    return data


def format_path(path: list[str | int] | None) -> str:
    """Render *path* as ``$`` or ``$["key"][0]...``."""
    if not path:
        return "$"
    segments = [
        str(seg) if isinstance(seg, int) else f'"{seg}"' for seg in path
    ]
    return "$[" + "][".join(segments) + "]"


def parse_path(text: str) -> list[str | int]:
    """Read a path written by :func:`format_path`.

    Keys are not escaped by the formatter, so a quoted segment may itself
    contain ``"]``; the reader backtracks over candidate closing positions
    until the rest of the text parses.
    """
    if not text.startswith("$"):
        raise PathSyntaxError("path must start with $")
    if text == "$":
        return []
    segments = _parse_segments(text, 1)
    if segments is None:
        raise PathSyntaxError(f"invalid path: {text}")
    return segments


def _parse_segments(text: str, pos: int) -> list[str | int] | None:
    if pos == len(text):
        return []
    if text[pos] != "[":
        return None
    pos += 1

    if text.startswith('"', pos):
        close = text.find('"]', pos + 1)
        while close != -1:
            after = close + 2
            if after == len(text) or text[after] == "[":
                rest = _parse_segments(text, after)
                if rest is not None:
                    return [text[pos + 1 : close]] + rest
            close = text.find('"]', close + 1)
        return None

    close = text.find("]", pos)
    if close == -1 or not _INDEX_RE.fullmatch(text[pos:close]):
        return None
    rest = _parse_segments(text, close + 1)
    if rest is None:
        return None
    return [int(text[pos:close])] + rest
