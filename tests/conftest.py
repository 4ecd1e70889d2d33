"""Pytest configuration and shared fixtures."""

from unittest.mock import Mock

import pytest

from doi_labeler.cache_store import CacheStore


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (require network, external services)",
    )


def make_response(status_code=200, body=None, reason="OK", json_error=None):
    """Stand-in for requests.Response."""
    resp = Mock()
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.reason = reason
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = body
    return resp


@pytest.fixture
def cache_path(tmp_path):
    return str(tmp_path / "cache" / "doi-cache.json")


@pytest.fixture
def store(cache_path):
    store = CacheStore(cache_path, credit_limit=3)
    store.load()
    return store


@pytest.fixture
def crossref_work():
    """Trimmed Crossref /works/{doi} message."""
    return {
        "DOI": "10.1038/nature12373",
        "title": ["Nanometre-scale thermometry in a living cell"],
        "author": [
            {"given": "G.", "family": "Kucsko"},
            {"given": "P. C.", "family": "Maurer"},
            {"family": "Lukin"},
        ],
        "link": [
            {"URL": "https://www.nature.com/articles/nature12373.xml", "content-type": "text/xml"},
            {"URL": "https://www.nature.com/articles/nature12373.pdf", "content-type": "application/pdf"},
            {"URL": "https://example.org/second.pdf", "content-type": "application/pdf"},
        ],
        "container-title": ["Nature"],
        "published": {"date-parts": [[2013, 7, 31]]},
    }
