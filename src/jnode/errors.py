"""Errors raised while committing a node edit."""

from __future__ import annotations


class EditError(Exception):
    """Base class; ``message`` is what the user sees inline."""

    message = "Edit failed"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class NoNodeSelected(EditError):
    message = "No node selected"


class InvalidJsonForComplexNode(EditError):
    """The draft is not JSON but the node has object/array children."""

    message = "Invalid JSON for object/array"


class ApplyFailed(EditError):
    """Resolving the path, merging or serializing the document failed."""

    message = "Failed to apply change to document"


class DocumentCorrupt(ApplyFailed):
    """The stored document text is not valid JSON."""
