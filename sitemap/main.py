"""
Sitemap Service - Main FastAPI Application
Renders site content through the filter chain, with sitemaps served from
a per-locale file cache that is only regenerated after its duration expires
"""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from config.settings import settings
from sitemap import crud
from sitemap.cache import SITEMAP_MIME_TYPE
from sitemap.db import engine, get_db, init_db
from sitemap.pipeline import SitemapPipeline, get_pipeline
from sitemap.render import RenderContext, Resource
from sitemap.schemas import CacheStats, HealthStatus

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger("sitemap")

# Version tracking
APP_VERSION = "v0.3.0"
APP_NAME = "Sitemap Service"

# Render mode -> workspace read from
RENDER_MODES = {
    "live": settings.live_workspace,
    "preview": settings.default_workspace,
}

SITE_LOCALES = frozenset(settings.site_locales)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{APP_NAME} {APP_VERSION} started "
                f"(sitemap cache duration {settings.sitemap_cache_duration})")
    yield


app = FastAPI(
    title=APP_NAME,
    description="Sitemaps rendered from the content repository, cached per locale",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.get("/health", response_model=HealthStatus)
def health_check():
    """Health check endpoint."""
    return HealthStatus(status="ok", database=engine.dialect.name)


@app.get("/version")
def version_info():
    """Version information endpoint."""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "full": f"{APP_NAME} {APP_VERSION}",
    }


@app.get("/cache/stats", response_model=CacheStats)
def cache_stats(pipeline: SitemapPipeline = Depends(get_pipeline)):
    """Get cache statistics."""
    return CacheStats(
        output_cache=pipeline.output_cache.get_stats(),
        sitemap_cache=pipeline.gate.get_stats(),
    )


@app.delete("/cache/output")
def clear_output_cache(pipeline: SitemapPipeline = Depends(get_pipeline)):
    """
    Clear the volatile output cache.

    Stored sitemap files are not affected: they only refresh on expiry.
    """
    return {"cleared": pipeline.output_cache.clear()}


@app.get("/render/{mode}/{locale}/{node_path:path}")
def render_node(
    mode: str,
    locale: str,
    node_path: str,
    template: str = Query("default", min_length=1),
    db: Session = Depends(get_db),
    pipeline: SitemapPipeline = Depends(get_pipeline),
):
    """
    Render a content node.

    e.g. /render/live/en/sites/acme/sitemap.xml
    """
    workspace = RENDER_MODES.get(mode)
    if workspace is None:
        raise HTTPException(status_code=404, detail=f"Unknown render mode: {mode}")

    path = "/" + node_path.strip("/")
    if path.endswith(".xml"):
        path = path[: -len(".xml")]

    # Only configured languages get a stored sitemap
    if locale not in SITE_LOCALES:
        raise HTTPException(status_code=404, detail=f"Unknown locale: {locale}")

    node = crud.get_node_by_path(db, workspace, path)
    if node is None:
        raise HTTPException(status_code=404, detail=f"Node not found: {path}")

    context = RenderContext(mode=mode, locale=locale, base_url=settings.site_base_url)
    resource = Resource(node=node, locale=locale, template=template)
    out = pipeline.chain.render(context, resource)

    if out is None or context.status_code != 200:
        status = context.status_code if context.status_code != 200 else 404
        return Response(status_code=status)
    return Response(content=out, media_type=SITEMAP_MIME_TYPE)
