"""Content-addressed analysis cache for Plegar.

Provides (content_hash, key) -> result caching so re-analyzing unchanged
text (undo/redo, switching tabs, re-focusing an editor) skips the pipeline.
The key combines the language, the detail level and the config hash.

Thread Safety:
    DictAnalysisCache is not thread-safe. For parallel analysis, use a cache
    implementation with internal locking (e.g. threading.Lock around get/put).

Example:
    >>> from plegar import LanguageEngine, DictAnalysisCache
    >>> cache = DictAnalysisCache()
    >>> engine = LanguageEngine("css", cache=cache)
    >>> first = engine.run("a { }")
    >>> second = engine.run("a { }")  # Cache hit, no re-analysis
    >>> first is second
    True
"""

from __future__ import annotations

from collections import OrderedDict
from typing import TYPE_CHECKING, Any, Protocol

from plegar.utils.hashing import fingerprint, hash_str

if TYPE_CHECKING:
    from plegar.config import AnalysisConfig


class AnalysisCache(Protocol):
    """Protocol for content-addressed analysis caches.

    Cache key is (content_hash, key). Cached values are AnalysisResult or
    StructureResult objects, which are immutable and safe to share.
    """

    def get(self, content_hash: str, key: str) -> Any | None:
        """Return cached result if present, else None."""
        ...

    def put(self, content_hash: str, key: str, result: Any) -> None:
        """Store result in cache."""
        ...


class DictAnalysisCache:
    """In-memory analysis cache using a dict.

    With ``maxsize`` set, the least recently used entry is evicted once the
    cache is full. Not thread-safe.
    """

    __slots__ = ("_data", "_maxsize", "hits", "misses")

    def __init__(self, maxsize: int | None = None) -> None:
        if maxsize is not None and maxsize < 1:
            raise ValueError(f"maxsize must be positive, got {maxsize}")
        self._data: OrderedDict[tuple[str, str], Any] = OrderedDict()
        self._maxsize = maxsize
        self.hits = 0
        self.misses = 0

    def get(self, content_hash: str, key: str) -> Any | None:
        """Return cached result if present, else None."""
        entry = (content_hash, key)
        result = self._data.get(entry)
        if result is None:
            self.misses += 1
            return None
        self.hits += 1
        self._data.move_to_end(entry)
        return result

    def put(self, content_hash: str, key: str, result: Any) -> None:
        """Store result in cache."""
        entry = (content_hash, key)
        self._data[entry] = result
        self._data.move_to_end(entry)
        if self._maxsize is not None:
            while len(self._data) > self._maxsize:
                self._data.popitem(last=False)

    def clear(self) -> None:
        self._data.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._data)


def hash_content(source: str) -> str:
    """Compute SHA256 hash of source for cache key.

    Args:
        source: Raw editor text

    Returns:
        Hex digest of SHA256 hash
    """
    return hash_str(source)


def hash_config(config: AnalysisConfig) -> str:
    """Compute a stable hash of AnalysisConfig for cache keys.

    Every field affects some output (classes, folds, recovery), so the whole
    config is fingerprinted.
    """
    return fingerprint(config)


__all__ = [
    "AnalysisCache",
    "DictAnalysisCache",
    "hash_config",
    "hash_content",
]
