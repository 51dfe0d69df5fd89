"""
Render filter chain.

Filters are sorted by priority. ``prepare`` runs in order until a filter
returns output; ``execute`` then runs in reverse from that filter back to
the first, each one receiving the previous output and returning the next.
"""
import logging
from typing import Callable, Iterable, List, Optional, Sequence

from sitemap.cache.output_cache import OutputCache
from .context import RenderContext, Resource

logger = logging.getLogger("render.chain")


class RenderFilter:
    """
    Base class of render filters.

    A filter only takes part in a render when the resource node type and the
    render mode match its conditions (an empty condition matches everything).
    """

    def __init__(
        self,
        priority: float,
        apply_on_node_types: Sequence[str] = (),
        apply_on_modes: Sequence[str] = (),
        description: str = "",
    ):
        self.priority = priority
        self.apply_on_node_types = tuple(apply_on_node_types)
        self.apply_on_modes = tuple(apply_on_modes)
        self.description = description

    def applies_to(self, context: RenderContext, resource: Resource) -> bool:
        if self.apply_on_node_types and resource.node_type not in self.apply_on_node_types:
            return False
        if self.apply_on_modes and context.mode not in self.apply_on_modes:
            return False
        return True

    def prepare(self, context: RenderContext, resource: Resource) -> Optional[str]:
        """Return output to stop the chain, or None to continue."""
        return None

    def execute(self, previous_out: Optional[str], context: RenderContext, resource: Resource) -> Optional[str]:
        return previous_out

    def __repr__(self):
        return f"<{type(self).__name__}(priority={self.priority})>"


class RenderChain:
    """Runs a resource through an ordered list of filters."""

    def __init__(self, filters: Iterable[RenderFilter]):
        self.filters: List[RenderFilter] = sorted(filters, key=lambda f: f.priority)

    def render(self, context: RenderContext, resource: Resource) -> Optional[str]:
        active = [f for f in self.filters if f.applies_to(context, resource)]

        out = None
        index = 0
        while index < len(active):
            out = active[index].prepare(context, resource)
            if out is not None:
                logger.debug(f"{active[index]!r} answered prepare for {resource.path}")
                break
            index += 1

        index = min(index, len(active) - 1)
        while index >= 0:
            out = active[index].execute(out, context, resource)
            index -= 1
        return out


class OutputCacheFilter(RenderFilter):
    """
    Serves rendered fragments from the volatile output cache and stores
    new ones. Blank output is never cached.
    """

    def __init__(self, output_cache: OutputCache, priority: float = 16.0):
        super().__init__(priority=priority, description="Volatile output cache")
        self.output_cache = output_cache

    def prepare(self, context: RenderContext, resource: Resource) -> Optional[str]:
        return self.output_cache.get(resource.path, resource.locale, resource.template)

    def execute(self, previous_out: Optional[str], context: RenderContext, resource: Resource) -> Optional[str]:
        if previous_out and previous_out.strip() and context.status_code == 200:
            self.output_cache.put(resource.path, resource.locale, resource.template, previous_out)
        return previous_out


View = Callable[[RenderContext, Resource], str]


class TemplateRenderFilter(RenderFilter):
    """Last filter of the chain: renders the resource with its view."""

    def __init__(self, views: dict, priority: float = 100.0):
        """
        Args:
            views: Mapping of (node_type, template) to a view callable
        """
        super().__init__(priority=priority, description="Template rendering")
        self.views = views

    def prepare(self, context: RenderContext, resource: Resource) -> Optional[str]:
        view = self.views.get((resource.node_type, resource.template.lower()))
        if view is None:
            logger.warning(f"No view for {resource.node_type} with template '{resource.template}'")
            context.status_code = 404
            return ""
        return view(context, resource)
