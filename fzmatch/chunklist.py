"""An append-only list of items stored in fixed-size chunks."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from .cache import CHUNK_SIZE, ChunkCache
from .item import Item

ItemBuilder = Callable[[str], "Item | None"]


@dataclass(eq=False)
class Chunk:
    """Up to ``CHUNK_SIZE`` items."""

    items: list[Item] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)

    def is_full(self) -> bool:
        """Whether the chunk holds ``CHUNK_SIZE`` items."""
        return len(self.items) == CHUNK_SIZE

    def _copy(self) -> Chunk:
        return Chunk(list(self.items))


def count_items(chunks: Iterable[Chunk]) -> int:
    """Total number of items in ``chunks``."""
    return sum(chunk.count for chunk in chunks)


class ChunkList:
    """Items built from input data, grouped into chunks.

    ``trans`` builds an item from a piece of input, or returns ``None``
    to reject it.
    """

    def __init__(self, cache: ChunkCache, trans: ItemBuilder) -> None:
        self._chunks: list[Chunk] = []
        self._lock = threading.Lock()
        self._trans = trans
        self._cache = cache

    def push(self, data: str) -> bool:
        """Build an item from ``data`` and add it; False if it was rejected."""
        with self._lock:
            if not self._chunks or self._chunks[-1].is_full():
                self._chunks.append(Chunk())
            item = self._trans(data)
            if item is None:
                return False
            self._chunks[-1].items.append(item)
            return True

    def clear(self) -> None:
        """Drop every item."""
        with self._lock:
            self._chunks = []

    def snapshot(self, tail: int = 0) -> tuple[list[Chunk], int, bool]:
        """Return a stable view of the chunks, the item count and a flag.

        With a positive ``tail``, only the last ``tail`` items are kept,
        older ones are discarded for good, and the flag tells whether
        anything was discarded.
        """
        with self._lock:
            changed = False
            if tail > 0 and count_items(self._chunks) > tail:
                changed = True
                num_chunks = 0
                left = tail
                for chunk in reversed(self._chunks):
                    if left <= 0:
                        break
                    num_chunks += 1
                    left -= chunk.count

                min_index = len(self._chunks) - num_chunks
                self._cache.retire(*self._chunks[:min_index])
                kept = self._chunks[min_index:]

                left = tail
                for i, chunk in reversed(list(enumerate(kept))):
                    if chunk.count > left:
                        kept[i] = Chunk(chunk.items[chunk.count - left:])
                        self._cache.retire(chunk)
                        break
                    left -= chunk.count
                self._chunks = kept

            chunks = list(self._chunks)
            if chunks:
                # The first and last chunks may still change; hand out copies.
                if tail > 0 and len(chunks) > 1:
                    chunks[0] = chunks[0]._copy()
                chunks[-1] = chunks[-1]._copy()
            return chunks, count_items(chunks), changed