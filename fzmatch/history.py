"""Query history backed by a plain text file."""

from __future__ import annotations

import os

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


class HistoryError(Exception):
    """Raised when the history file cannot be used."""


def _history_error(path: str, error: OSError) -> HistoryError:
    if isinstance(error, PermissionError):
        return HistoryError(f"permission denied: {path}")
    return HistoryError(f"invalid history file: {error}")


def _write(path: str, data: bytes) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as handle:
        handle.write(data)


class History:
    """Lines of a history file with a cursor for browsing them.

    The last line is always the entry being edited.
    """

    def __init__(self, path: str | os.PathLike[str], max_size: int) -> None:
        self.path = os.fspath(path)
        self.max_size = max_size
        try:
            with open(self.path, "rb") as handle:
                data = handle.read()
        except FileNotFoundError:
            data = b""
            try:
                _write(self.path, data)
            except OSError as error:
                raise _history_error(self.path, error) from error
        except OSError as error:
            raise _history_error(self.path, error) from error

        text = data.decode(_ENCODING, _ERRORS)
        lines = text.strip("\n").split("\n")
        if lines[-1]:
            lines.append("")
        self.lines: list[str] = lines
        self._modified: dict[int, str] = {}
        self._cursor = len(lines) - 1

    def append(self, line: str) -> None:
        """Record ``line`` and write the history file; empty lines are skipped."""
        if not line:
            return
        lines = self.lines[:-1] + [line]
        if len(lines) > self.max_size:
            lines = lines[len(lines) - self.max_size:]
        self.lines = lines + [""]
        _write(self.path, "\n".join(self.lines).encode(_ENCODING, _ERRORS))

    def override(self, text: str) -> None:
        """Replace the entry under the cursor without writing it to the file."""
        last = len(self.lines) - 1
        if self._cursor == last:
            self.lines[self._cursor] = text
        elif self._cursor < last:
            self._modified[self._cursor] = text

    def current(self) -> str:
        """Return the entry under the cursor."""
        return self._modified.get(self._cursor, self.lines[self._cursor])

    def previous(self) -> str:
        """Move the cursor to the older entry and return it."""
        if self._cursor > 0:
            self._cursor -= 1
        return self.current()

    def next(self) -> str:
        """Move the cursor to the newer entry and return it."""
        if self._cursor < len(self.lines) - 1:
            self._cursor += 1
        return self.current()