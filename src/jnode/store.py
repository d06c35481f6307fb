"""Document store holding the authoritative JSON text."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Protocol

_LOG = logging.getLogger(__name__)

Listener = Callable[[str], None]


class DocumentStore(Protocol):
    def get_current_text(self) -> str: ...

    def set_text(self, text: str, dirty: bool) -> None: ...


class MemoryDocumentStore:
    """In-memory store that notifies listeners whenever the text changes."""

    def __init__(self, text: str = "{}", file_path: str = "") -> None:
        self._text: str = text
        self.file_path: str = file_path
        self.dirty: bool = False
        self._listeners: list[Listener] = []

    def get_current_text(self) -> str:
        return self._text

    def set_text(self, text: str, dirty: bool = True) -> None:
        self._text = text
        self.dirty = dirty
        _LOG.debug("document updated (%d chars, dirty=%s)", len(text), dirty)
        for listener in list(self._listeners):
            # the text is already replaced; a failing view must not stop the rest
            try:
                listener(text)
            except Exception:
                _LOG.exception("document listener %r failed", listener)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- File I/O ----------------------------------------------------------

    @classmethod
    def from_file(cls, file_path: str) -> MemoryDocumentStore:
        """Load *file_path*.

        Raises ``OSError`` when it cannot be read and ``UnicodeDecodeError``
        when it is not UTF-8.
        """
        content = Path(file_path).read_text(encoding="utf-8")
        return cls(content, file_path=file_path)

    def save(self, file_path: str = "") -> str:
        """Write the text to *file_path* (or the current file) and return it.

        Raises ``UnicodeEncodeError`` for text that is not valid UTF-8 (lone
        surrogates) and ``OSError`` for I/O failures; in both cases the
        existing file is left as it was.
        """
        target = file_path or self.file_path
        if not target:
            raise ValueError("no file name")
        # encode first so a failure leaves the file on disk untouched
        data = self._text.encode("utf-8")
        path = Path(target)
        path.parent.mkdir(parents=True, exist_ok=True)
        _write_atomic(path, data)
        self.file_path = str(path)
        self.dirty = False
        _LOG.info("saved %s", self.file_path)
        return self.file_path


def _write_atomic(path: Path, data: bytes) -> None:
    """Replace *path* with *data* via a temp file in the same directory."""
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        if path.exists():
            os.chmod(tmp_name, path.stat().st_mode & 0o7777)
        os.replace(tmp_name, path)
    except OSError:
        Path(tmp_name).unlink(missing_ok=True)
        raise
