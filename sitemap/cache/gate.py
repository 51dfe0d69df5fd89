"""
Sitemap file cache filter.

Generating every sitemap entry is expensive, and the volatile output cache
can drop a sitemap at any time under load. This filter keeps a stored copy
of each sitemap per locale under the sitemap node and only lets the view
regenerate it once the configured duration (4 hours by default) has passed.

prepare: decide whether this request refreshes the stored copy, and flush
         the output cache for the path if it does.
execute: store the freshly rendered sitemap, or serve the stored copy.
"""
import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, Any, Optional

from config.settings import settings
from sitemap.models import SITEMAP_NODE_TYPES, utcnow
from sitemap.render.context import RenderContext, Resource
from sitemap.render.filters import RenderFilter
from .coordinator import RequestCoordinator
from .core import SITEMAP_MIME_TYPE
from .output_cache import OutputCache, get_output_cache
from .store import CacheStore
from .ttl_policies import get_cache_duration, is_expired

logger = logging.getLogger("cache.gate")

Qualifier = Callable[[Resource], bool]


def uses_template(name: str) -> Qualifier:
    """Qualify resources rendered with the given template (case-insensitive)."""
    def qualifies(resource: Resource) -> bool:
        return (resource.template or "").lower() == name.lower()
    return qualifies


class SitemapCacheFilter(RenderFilter):
    """
    Two-phase gate around sitemap rendering.

    No locking across requests: concurrent requests on an expired sitemap
    may all regenerate it, and the last write wins.
    """

    def __init__(
        self,
        store: CacheStore,
        coordinator: Optional[RequestCoordinator] = None,
        output_cache: Optional[OutputCache] = None,
        ttl: Optional[timedelta] = None,
        qualifies: Optional[Qualifier] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Args:
            store: Storage of sitemap files
            coordinator: Carries the decision from prepare to execute
            output_cache: Volatile cache flushed before a refresh
            ttl: Lifetime of a stored sitemap (defaults to the configured duration)
            qualifies: Which resources are cached (defaults to the default template)
            clock: Current time, naive UTC
        """
        super().__init__(
            priority=15.0,
            apply_on_node_types=SITEMAP_NODE_TYPES,
            apply_on_modes=("live",),
            description="Filter for creating sitemap file nodes for caching",
        )
        self.store = store
        self.coordinator = coordinator or RequestCoordinator()
        self.output_cache = output_cache or get_output_cache()
        self.ttl = ttl if ttl is not None else get_cache_duration()
        self.qualifies = qualifies or uses_template(settings.sitemap_cache_template)
        self.clock = clock

        self._stats = {
            "refreshes": 0,
            "hits": 0,
            "writes": 0,
            "read_failures": 0,
        }

    def prepare(self, context: RenderContext, resource: Resource) -> Optional[str]:
        if not self.qualifies(resource):
            return None

        entry = self.store.get(resource.node, resource.locale)
        refresh = entry is None or is_expired(entry.last_modified, self.clock(), self.ttl)
        self.coordinator.set_decision(context, refresh)

        if refresh:
            reason = "missing" if entry is None else "expired"
            logger.info(f"SITEMAP REFRESH ({reason}): {resource.path} [{resource.locale}]")
            self._stats["refreshes"] += 1
            self.output_cache.flush_for_path(resource.path)
        else:
            logger.debug(f"SITEMAP HIT: {resource.path} [{resource.locale}]")
            self._stats["hits"] += 1
        return None

    def execute(self, previous_out: Optional[str], context: RenderContext, resource: Resource) -> Optional[str]:
        if not self.qualifies(resource):
            return previous_out

        refresh = self.coordinator.get_decision(context)
        if refresh and previous_out and previous_out.strip():
            self.store.put(resource.path, resource.locale, previous_out.encode("utf-8"), SITEMAP_MIME_TYPE)
            self._stats["writes"] += 1
            return previous_out

        try:
            return self.store.read_text(resource.node, resource.locale)
        except OSError as e:
            logger.error(f"Unable to read sitemap file cache contents: {e}")
            self._stats["read_failures"] += 1
            context.status_code = 404
            return None

    def get_stats(self) -> Dict[str, Any]:
        return dict(self._stats, ttl_seconds=int(self.ttl.total_seconds()))
