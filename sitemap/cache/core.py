"""
Core cache data structures.
"""
from dataclasses import dataclass
from datetime import datetime

from sitemap.models import utcnow

SITEMAP_MIME_TYPE = "application/xml"


@dataclass
class CacheEntry:
    """
    A stored sitemap file for one (owner node, locale) pair.
    """
    owner_path: str
    locale: str
    data: bytes
    content_type: str
    last_modified: datetime

    def text(self, encoding: str = "utf-8") -> str:
        return self.data.decode(encoding)


@dataclass(frozen=True)
class FreshnessDecision:
    """Whether the current request must regenerate the sitemap."""
    refresh: bool


@dataclass
class OutputFragment:
    """
    A rendered fragment held by the volatile output cache.
    """
    content: str
    stored_at: datetime
    ttl_seconds: int

    @property
    def age_seconds(self) -> float:
        """Seconds since the fragment was stored."""
        return (utcnow() - self.stored_at).total_seconds()

    @property
    def is_fresh(self) -> bool:
        """Check if the fragment is within its TTL."""
        return self.age_seconds < self.ttl_seconds
