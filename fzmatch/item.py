"""An input line as seen by the matchers."""

from __future__ import annotations

from dataclasses import dataclass, field

from .ansi import AnsiOffset, extract_color


@dataclass
class Item:
    """One line of input.

    ``text`` is what is matched against; ``orig_text`` keeps the line as
    read when it was transformed before matching; ``colors`` holds the
    coloured spans of ``text``.
    """

    text: str
    index: int = 0
    orig_text: str | None = None
    colors: list[AnsiOffset] = field(default_factory=list)

    def as_string(self, strip_ansi: bool) -> str:
        """Return the original line, without escape sequences if asked."""
        if self.orig_text is not None:
            if strip_ansi:
                return extract_color(self.orig_text, None)[0]
            return self.orig_text
        return self.text