"""Per-chunk cache of match results keyed by query string."""

from __future__ import annotations

import threading
from typing import Any, Protocol

CHUNK_SIZE = 100

# Results of low-selectivity queries are not worth caching.
QUERY_CACHE_MAX = CHUNK_SIZE // 5


class _Chunk(Protocol):
    def is_full(self) -> bool: ...


class ChunkCache:
    """Associates a chunk and a query string with the chunk's results.

    Only full chunks are cached, as the contents of a partial chunk can
    still change.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        # Keyed by identity; the chunk is kept so its id stays unique.
        self._cache: dict[int, tuple[_Chunk, dict[str, list[Any]]]] = {}

    def clear(self) -> None:
        """Drop every cached result."""
        with self._lock:
            self._cache = {}

    def retire(self, *args: _Chunk) -> None:
        """Drop the cached results of the given chunks."""
        with self._lock:
            for chunk in args:
                self._cache.pop(id(chunk), None)

    def add(self, chunk: _Chunk, key: str, results: list[Any]) -> None:
        """Cache ``results`` of query ``key`` for ``chunk``."""
        if not key or not chunk.is_full() or len(results) > QUERY_CACHE_MAX:
            return
        with self._lock:
            entry = self._cache.setdefault(id(chunk), (chunk, {}))
            entry[1][key] = results

    def _queries(self, chunk: _Chunk) -> dict[str, list[Any]] | None:
        entry = self._cache.get(id(chunk))
        return entry[1] if entry is not None else None

    def lookup(self, chunk: _Chunk, key: str) -> list[Any] | None:
        """Return the cached results of query ``key``, or ``None``."""
        if not key or not chunk.is_full():
            return None
        with self._lock:
            queries = self._queries(chunk)
            if queries is None:
                return None
            return queries.get(key)

    def search(self, chunk: _Chunk, key: str) -> list[Any] | None:
        """Return cached results of the longest prefix or suffix of ``key``.

        For each length, the prefix is tried before the suffix.
        """
        if not key or not chunk.is_full():
            return None
        with self._lock:
            queries = self._queries(chunk)
            if queries is None:
                return None
            for idx in range(1, len(key)):
                for substr in (key[:len(key) - idx], key[idx:]):
                    cached = queries.get(substr)
                    if cached is not None:
                        return cached
        return None