"""
Sitemap Service: content rendering with a per-locale sitemap file cache.
"""
