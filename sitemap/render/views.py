"""
Sitemap views: the XML documents rendered for sitemap nodes.
"""
import logging
from typing import Dict, List, Optional, Tuple
from xml.sax.saxutils import escape

from sqlalchemy.orm import object_session

from config.settings import settings
from sitemap import crud
from sitemap.cache.coordinator import RequestCoordinator
from sitemap.models import ContentNode, SITEMAP_NODE_TYPES
from .context import RenderContext, Resource
from .filters import View

logger = logging.getLogger("render.views")

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


def page_url(base_url: str, locale: str, path: str) -> str:
    """Public URL of a page, e.g. https://example.com/en/sites/acme/home.html"""
    return f"{base_url.rstrip('/')}/{locale}{path}.html"


def build_urlset(pages: List[ContentNode], base_url: str, locale: str) -> str:
    """
    Build a <urlset> document listing pages.
    """
    lines = ['<?xml version="1.0" encoding="UTF-8"?>', f'<urlset xmlns="{SITEMAP_NS}">']
    for page in pages:
        lines.append("  <url>")
        lines.append(f"    <loc>{escape(page_url(base_url, locale, page.path))}</loc>")
        if page.last_modified is not None:
            lines.append(f"    <lastmod>{page.last_modified.date().isoformat()}</lastmod>")
        lines.append("  </url>")
    lines.append("</urlset>")
    return "\n".join(lines) + "\n"


def build_sitemap_index(sitemap_path: str, base_url: str, locales: List[str]) -> str:
    """
    Build a <sitemapindex> pointing at the sitemap of each locale.
    """
    lines = ['<?xml version="1.0" encoding="UTF-8"?>', f'<sitemapindex xmlns="{SITEMAP_NS}">']
    for locale in locales:
        loc = f"{base_url.rstrip('/')}/{locale}{sitemap_path}.xml"
        lines.append(f"  <sitemap><loc>{escape(loc)}</loc></sitemap>")
    lines.append("</sitemapindex>")
    return "\n".join(lines) + "\n"


class SitemapViews:
    """
    Views for sitemap nodes. The default view is the expensive one: it walks
    every page of the site, so it is skipped when the stored sitemap is
    still fresh for this request.
    """

    def __init__(
        self,
        coordinator: Optional[RequestCoordinator] = None,
        locales: Optional[List[str]] = None,
    ):
        self.coordinator = coordinator or RequestCoordinator()
        self.locales = locales or settings.site_locales

    def default(self, context: RenderContext, resource: Resource) -> str:
        if not self.coordinator.should_render(context):
            logger.debug(f"Stored sitemap still fresh, not rendering {resource.path}")
            return ""

        node = resource.node
        site_path = node.path.rpartition("/")[0] or node.path
        pages = crud.get_pages_under(object_session(node), node.workspace, site_path)
        logger.info(f"Rendering sitemap {resource.path} [{resource.locale}] with {len(pages)} pages")
        return build_urlset(pages, context.base_url, resource.locale)

    def index(self, context: RenderContext, resource: Resource) -> str:
        return build_sitemap_index(resource.path, context.base_url, self.locales)

    def registry(self) -> Dict[Tuple[str, str], View]:
        """(node_type, template) -> view, for TemplateRenderFilter."""
        views: Dict[Tuple[str, str], View] = {}
        for node_type in SITEMAP_NODE_TYPES:
            views[(node_type, "default")] = self.default
            views[(node_type, "index")] = self.index
        return views
