"""
Assembly of the sitemap render chain.
"""
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from sitemap.cache import CacheStore, OutputCache, RequestCoordinator, get_output_cache
from sitemap.cache.gate import SitemapCacheFilter
from sitemap.db import SessionLocal
from sitemap.models import utcnow
from sitemap.render import OutputCacheFilter, RenderChain, SitemapViews, TemplateRenderFilter


@dataclass
class SitemapPipeline:
    chain: RenderChain
    gate: SitemapCacheFilter
    output_cache: OutputCache


def build_pipeline(
    session_factory=SessionLocal,
    output_cache: Optional[OutputCache] = None,
    ttl: Optional[timedelta] = None,
    clock: Callable[[], datetime] = utcnow,
) -> SitemapPipeline:
    """
    Build the chain: sitemap file cache (15), output cache (16), views (100).

    The gate and the views share one coordinator so the view can skip
    rendering a sitemap whose stored copy is still fresh.
    """
    output_cache = output_cache or get_output_cache()
    coordinator = RequestCoordinator()
    gate = SitemapCacheFilter(
        store=CacheStore(session_factory=session_factory),
        coordinator=coordinator,
        output_cache=output_cache,
        ttl=ttl,
        clock=clock,
    )
    views = SitemapViews(coordinator=coordinator)
    chain = RenderChain([
        gate,
        OutputCacheFilter(output_cache),
        TemplateRenderFilter(views.registry()),
    ])
    return SitemapPipeline(chain=chain, gate=gate, output_cache=output_cache)


# Global pipeline instance
_pipeline: Optional[SitemapPipeline] = None
_pipeline_lock = threading.Lock()


def get_pipeline() -> SitemapPipeline:
    """Get or create the global pipeline - use in FastAPI dependencies."""
    global _pipeline
    if _pipeline is None:
        # Endpoints run in a threadpool; build only one pipeline
        with _pipeline_lock:
            if _pipeline is None:
                _pipeline = build_pipeline()
    return _pipeline
