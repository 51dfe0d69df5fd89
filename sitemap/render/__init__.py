"""
Render pipeline: per-request context, filter chain and sitemap views.
"""
from .context import RenderContext, Resource
from .filters import OutputCacheFilter, RenderChain, RenderFilter, TemplateRenderFilter
from .views import SitemapViews, build_sitemap_index, build_urlset

__all__ = [
    "RenderContext",
    "Resource",
    "RenderFilter",
    "RenderChain",
    "OutputCacheFilter",
    "TemplateRenderFilter",
    "SitemapViews",
    "build_urlset",
    "build_sitemap_index",
]
