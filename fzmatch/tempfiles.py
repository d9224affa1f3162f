"""Temporary files holding lists of strings."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterable


def write_temporary_file(data: Iterable[str], print_sep: str) -> str | None:
    """Write ``data`` joined and terminated by ``print_sep`` to a new file.

    Returns the file's path, or ``None`` if no file could be created.
    """
    try:
        fd, name = tempfile.mkstemp(prefix="fzmatch-temp-")
    except OSError:
        return None
    with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
        handle.write(print_sep.join(data))
        handle.write(print_sep)
    return name


def remove_files(files: Iterable[str | os.PathLike[str]]) -> None:
    """Remove the given files, ignoring those that cannot be removed."""
    for name in files:
        try:
            os.remove(name)
        except OSError:
            pass