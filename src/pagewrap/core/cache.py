"""In-memory LRU cache of wrapped pages, keyed by document id + raw content.

Entries are never invalidated explicitly: a changed document produces a new
key, and stale keys age out through least-recently-used eviction.
"""

import json
from collections import OrderedDict
from typing import Any, Optional

import structlog

from pagewrap.core.utils.hashing import sha256


log = structlog.get_logger()

DEFAULT_MAX_ENTRIES = 1024


def cache_key(file_id: str, content: str) -> str:
    """Return a deterministic key for (file_id, content); equal values give equal keys."""
    return sha256(json.dumps({"id": file_id, "content": content}, ensure_ascii=False))


class PageCache:
    """Bounded least-recently-used mapping from cache key to wrapped page."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self.max_entries = max_entries
        self._entries: OrderedDict[str, Any] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value and mark it most recently used, or None on a miss."""
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return self._entries[key]

    def set(self, key: str, value: Any) -> None:
        """Insert or refresh key, evicting the least recently used entries above capacity."""
        self._entries[key] = value
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            log.debug("cache_evict", key=evicted, size=len(self._entries))

    def clear(self) -> None:
        self._entries.clear()


_default_cache: Optional[PageCache] = None


def get_default_cache() -> PageCache:
    """Return the process-wide cache, creating it on first use."""
    global _default_cache
    if _default_cache is None:
        _default_cache = PageCache()
    return _default_cache
