"""
Names of stored sitemap files.
"""
from config.settings import settings

CACHE_NAME = settings.sitemap_cache_name


def cache_key_for(locale: str, prefix: str = CACHE_NAME) -> str:
    """
    Child file name of the sitemap cache for a locale.

    e.g. cache_key_for("fr") -> "sitemap-cache-fr"
    """
    return f"{prefix}-{locale}"
