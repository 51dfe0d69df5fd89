"""
Sitemap file cache with a fixed time-to-live, and the volatile output cache
it works around.
"""
from .core import CacheEntry, FreshnessDecision, OutputFragment, SITEMAP_MIME_TYPE
from .ttl_policies import CACHE_DURATION, get_cache_duration, is_expired
from .keys import CACHE_NAME, cache_key_for
from .store import CacheStore
from .coordinator import RequestCoordinator
from .output_cache import OutputCache, get_output_cache

__all__ = [
    # Core types
    "CacheEntry",
    "FreshnessDecision",
    "OutputFragment",
    "SITEMAP_MIME_TYPE",
    # Expiration
    "CACHE_DURATION",
    "get_cache_duration",
    "is_expired",
    # Naming
    "CACHE_NAME",
    "cache_key_for",
    # Storage and coordination
    "CacheStore",
    "RequestCoordinator",
    # Output cache
    "OutputCache",
    "get_output_cache",
]
