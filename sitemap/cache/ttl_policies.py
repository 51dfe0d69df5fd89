"""
Expiration policy for stored sitemap files.
"""
from datetime import datetime, timedelta

from config.settings import settings


# Read once at import; fixed for the process lifetime
CACHE_DURATION: timedelta = settings.sitemap_cache_duration


def get_cache_duration() -> timedelta:
    """Configured time-to-live of a stored sitemap file."""
    return CACHE_DURATION


def is_expired(last_modified: datetime, now: datetime, ttl: timedelta) -> bool:
    """
    Check whether a stored file is past its TTL.

    Args:
        last_modified: When the file was last written
        now: Current time, same timezone convention as last_modified
        ttl: Time-to-live

    Returns:
        True if now is strictly after last_modified + ttl
    """
    return now > last_modified + ttl
