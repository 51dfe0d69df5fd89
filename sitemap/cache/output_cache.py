"""
Volatile output cache for rendered fragments.

Fragments may be evicted at any time (TTL or capacity), so nothing here
guarantees a minimum freshness window.
"""
import threading
import logging
from collections import OrderedDict
from typing import Dict, Optional, Any, Tuple

from config.settings import settings
from sitemap.models import utcnow
from .core import OutputFragment

logger = logging.getLogger("cache.output")

FragmentKey = Tuple[str, str, str]


class OutputCache:
    """
    In-memory fragment cache keyed by (path, locale, template) with:
    - Per-fragment TTL
    - Bounded size, oldest fragment evicted first
    - Flush by resource path
    """

    def __init__(
        self,
        ttl_seconds: int = 3600,
        max_entries: int = 1000,
    ):
        """
        Initialize the output cache.

        Args:
            ttl_seconds: Lifetime of a stored fragment
            max_entries: Fragments kept before the oldest is evicted
        """
        self._cache: "OrderedDict[FragmentKey, OutputFragment]" = OrderedDict()
        self._cache_lock = threading.RLock()
        self._ttl_seconds = ttl_seconds
        self._max_entries = max_entries

        # Stats tracking
        self._stats = {
            "hits": 0,
            "misses": 0,
            "evictions": 0,
            "flushes": 0,
        }

    def get(self, path: str, locale: str, template: str) -> Optional[str]:
        """
        Get a fragment if present and fresh.
        """
        key = (path, locale, template)
        with self._cache_lock:
            fragment = self._cache.get(key)
            if fragment is None:
                self._stats["misses"] += 1
                return None
            if not fragment.is_fresh:
                del self._cache[key]
                self._stats["misses"] += 1
                self._stats["evictions"] += 1
                logger.debug(f"OUTPUT CACHE EXPIRED: {key} [age={fragment.age_seconds:.1f}s]")
                return None
            self._stats["hits"] += 1
            logger.debug(f"OUTPUT CACHE HIT: {key} [age={fragment.age_seconds:.1f}s]")
            return fragment.content

    def put(self, path: str, locale: str, template: str, content: str) -> None:
        """Store a fragment, evicting the oldest ones beyond capacity."""
        key = (path, locale, template)
        fragment = OutputFragment(
            content=content,
            stored_at=utcnow(),
            ttl_seconds=self._ttl_seconds,
        )
        with self._cache_lock:
            existing = self._cache.get(key)
            # Re-storing a served fragment must not extend its lifetime
            if existing is not None and existing.content == content and existing.is_fresh:
                return
            self._cache.pop(key, None)
            self._cache[key] = fragment
            while len(self._cache) > self._max_entries:
                evicted, _ = self._cache.popitem(last=False)
                self._stats["evictions"] += 1
                logger.debug(f"OUTPUT CACHE EVICTED: {evicted}")

    def flush_for_path(self, path: str) -> int:
        """
        Remove every fragment rendered for exactly this path.

        Returns:
            Number of fragments removed
        """
        with self._cache_lock:
            to_delete = [k for k in self._cache if k[0] == path]
            for key in to_delete:
                del self._cache[key]
            self._stats["flushes"] += 1
            if to_delete:
                logger.info(f"Flushed {len(to_delete)} output fragments for '{path}'")
            return len(to_delete)

    def clear(self) -> int:
        """
        Clear all fragments.

        Returns:
            Number of fragments cleared
        """
        with self._cache_lock:
            count = len(self._cache)
            self._cache.clear()
            logger.info(f"Cleared {count} output fragments")
            return count

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._cache_lock:
            total = self._stats["hits"] + self._stats["misses"]
            hit_rate = (self._stats["hits"] / total * 100) if total > 0 else 0

            return {
                "entries": len(self._cache),
                "hits": self._stats["hits"],
                "misses": self._stats["misses"],
                "evictions": self._stats["evictions"],
                "flushes": self._stats["flushes"],
                "hit_rate_percent": round(hit_rate, 1),
            }


# Global output cache instance
_output_cache: Optional[OutputCache] = None


def get_output_cache() -> OutputCache:
    """Get or create the global output cache."""
    global _output_cache
    if _output_cache is None:
        _output_cache = OutputCache(
            ttl_seconds=settings.output_cache_ttl_seconds,
            max_entries=settings.output_cache_max_entries,
        )
    return _output_cache
