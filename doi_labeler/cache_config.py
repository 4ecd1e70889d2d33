"""
HTTP response caching for Crossref lookups.

Crossref metadata (authors, title, journal) is immutable per DOI, so responses
are cached forever. Classification calls are never routed through this cache:
every POST spends a credit and must reach the service.
"""

import os

import requests
import requests_cache


def build_crossref_session(cache_dir: str | None) -> requests.Session:
    """Return a permanently caching session under cache_dir, or a plain one if unset."""
    if not cache_dir:
        return requests.Session()
    os.makedirs(cache_dir, exist_ok=True)
    return requests_cache.CachedSession(
        os.path.join(cache_dir, "http_cache_crossref"),
        backend="sqlite",
        expire_after=None,  # Never expire
        allowable_methods=("GET",),
        allowable_codes=(200, 203, 300, 301),
    )
