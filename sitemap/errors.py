"""
Exceptions raised by the content repository and the sitemap cache.
"""


class RepositoryError(Exception):
    """Content repository unreachable, stale node handle, or failed commit."""


class AccessDeniedError(RepositoryError):
    """Write attempted from a session without write permission."""


class CacheReadError(OSError):
    """The stored sitemap file could not be read back."""


class StateError(RuntimeError):
    """Freshness decision missing or recorded twice for one request."""
