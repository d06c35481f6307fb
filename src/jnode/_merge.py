"""Merge-or-replace decision for an edited node."""

from __future__ import annotations

from enum import Enum, auto

from ._shape import is_keyed_container


class MergeAction(Enum):
    MERGE = auto()  # shallow key union into the existing object
    REPLACE = auto()  # whole subtree swapped for the new value


def decide(original: object, parsed: object) -> MergeAction:
    """Merge only when both sides are JSON objects.

    Arrays, scalars and shape mismatches are always replaced.
    """
    if is_keyed_container(original) and is_keyed_container(parsed):
        return MergeAction.MERGE
    return MergeAction.REPLACE


def apply_merge(original: dict, parsed: dict) -> dict:
    """Copy every key of *parsed* onto *original* and return *original*.

    Keys missing from *parsed* are kept.  Nested values are replaced as a
    whole, not merged.
    """
    for key, value in parsed.items():
        original[key] = value
    return original
