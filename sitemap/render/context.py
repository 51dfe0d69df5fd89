"""
Per-request rendering state.
"""
from dataclasses import dataclass
from typing import Optional

from sitemap.cache.core import FreshnessDecision
from sitemap.models import ContentNode


@dataclass
class Resource:
    """A content node rendered with a template in a locale."""
    node: ContentNode
    locale: str
    template: str = "default"

    @property
    def path(self) -> str:
        return self.node.path

    @property
    def node_type(self) -> str:
        return self.node.node_type


@dataclass
class RenderContext:
    """
    State of one render request, created per HTTP request and passed
    explicitly through every filter of the chain.
    """
    mode: str
    locale: str
    base_url: str
    status_code: int = 200
    freshness: Optional[FreshnessDecision] = None
