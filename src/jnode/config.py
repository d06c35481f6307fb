"""Editor settings."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class EditorConfig:
    indent: int = 2
    ensure_ascii: bool = False
    # Keep string leaves as strings when the draft would parse as another
    # JSON type (e.g. "123" typed back as 123).
    preserve_string_leaves: bool = False
    read_only: bool = False

    def dumps_kwargs(self) -> dict[str, object]:
        return {"indent": self.indent, "ensure_ascii": self.ensure_ascii}
