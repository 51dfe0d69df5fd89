"""
Pydantic schemas for API response models
"""
from pydantic import BaseModel


class HealthStatus(BaseModel):
    """Health check response"""
    status: str
    database: str


class OutputCacheStats(BaseModel):
    """Volatile output cache counters"""
    entries: int
    hits: int
    misses: int
    evictions: int
    flushes: int
    hit_rate_percent: float


class SitemapCacheStats(BaseModel):
    """Sitemap file cache counters"""
    refreshes: int
    hits: int
    writes: int
    read_failures: int
    ttl_seconds: int


class CacheStats(BaseModel):
    """Combined cache statistics"""
    output_cache: OutputCacheStats
    sitemap_cache: SitemapCacheStats
