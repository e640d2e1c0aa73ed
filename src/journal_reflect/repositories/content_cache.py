"""In-memory content-addressed cache for reflections.

Entries expire lazily on access. Once the cache grows past its high-water
mark, every ``put`` also sweeps all expired entries. There is no LRU policy:
the key space is bounded by unique journal entries and TTL alone keeps it
in check.
"""

import logging

from journal_reflect.config import settings
from journal_reflect.dto import ReflectionResponse
from journal_reflect.entities import CacheEntryEntity
from journal_reflect.protocols import Clock

from .system_clock import SystemClock

logger = logging.getLogger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def content_hash(text: str) -> str:
    """Hash content into a short cache key.

    A 32-bit rolling hash (``h * 31 + code point``, wrapped to a signed
    32-bit integer) of which the absolute value is rendered in base36.
    Fast and order-sensitive, but not collision resistant.
    """
    h = 0
    for char in text:
        h = (h * 31 + ord(char)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    h = abs(h)

    if h == 0:
        return "0"

    digits = []
    while h:
        h, rem = divmod(h, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


class ContentCache:
    """TTL cache of reflections keyed by content hash.

    When the caller passes the normalized content alongside the key, the
    entry remembers it and a later lookup with different content is treated
    as a miss, so two colliding entries never share a reflection.

    Example:
        ```python
        cache = ContentCache.create()
        key = content_hash(text)
        response = cache.get(key, content=text)
        if response is None:
            response = await orchestrator.reflect(request)
            cache.put(key, response, content=text)
        ```
    """

    def __init__(
        self,
        ttl: float | None = None,
        max_entries: int | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the content cache.

        Args:
            ttl: Default time-to-live in seconds. Defaults to settings.
            max_entries: Size above which puts sweep expired entries. Defaults to settings.
            clock: Time source. Defaults to the system clock.
        """
        self._ttl = settings.cache_ttl if ttl is None else ttl
        self._max_entries = max_entries or settings.cache_max_entries
        self._clock = clock or SystemClock()
        self._entries: dict[str, CacheEntryEntity] = {}
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @classmethod
    def create(
        cls,
        ttl: float | None = None,
        clock: Clock | None = None,
    ) -> "ContentCache":
        """Factory method to create a ContentCache from settings."""
        return cls(ttl=ttl, clock=clock)

    def get(self, key: str, content: str | None = None) -> ReflectionResponse | None:
        """Look up a cached reflection.

        Args:
            key: Content hash
            content: Normalized content, checked against the stored entry when both are known

        Returns:
            The cached response, or None on a miss
        """
        entry = self._entries.get(key)

        if entry is None:
            self._misses += 1
            return None

        if entry.is_expired(self._clock.now()):
            del self._entries[key]
            self._evictions += 1
            self._misses += 1
            return None

        if content is not None and entry.content is not None and entry.content != content:
            logger.warning("Cache key collision on %s, treating as miss", key)
            self._misses += 1
            return None

        self._hits += 1
        return entry.response

    def put(
        self,
        key: str,
        response: ReflectionResponse,
        ttl: float | None = None,
        content: str | None = None,
    ) -> None:
        """Store a reflection under ``key``.

        Args:
            key: Content hash
            response: The reflection to cache
            ttl: Time-to-live in seconds. Defaults to the cache TTL.
            content: Normalized content the response was produced for
        """
        self._entries[key] = CacheEntryEntity(
            response=response,
            created_at=self._clock.now(),
            ttl=self._ttl if ttl is None else ttl,
            content=content,
        )

        if len(self._entries) > self._max_entries:
            removed = self.sweep_expired()
            logger.debug("Cache above %d entries, swept %d expired", self._max_entries, removed)

    def sweep_expired(self) -> int:
        """Remove all expired entries.

        Returns:
            Number of entries removed
        """
        now = self._clock.now()
        expired = [k for k, entry in self._entries.items() if entry.is_expired(now)]
        for k in expired:
            del self._entries[k]
        self._evictions += len(expired)
        return len(expired)

    def clear(self) -> int:
        """Clear all cache entries.

        Returns:
            Number of entries deleted
        """
        count = len(self._entries)
        self._entries.clear()
        return count

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with cache statistics
        """
        total = self._hits + self._misses
        return {
            "total_entries": len(self._entries),
            "max_entries": self._max_entries,
            "ttl": self._ttl,
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
            "hit_rate": round(self._hits / total, 4) if total else 0.0,
        }

    def __len__(self) -> int:
        return len(self._entries)
