"""
Crossref API client for fetching publication metadata.

Uses the Crossref REST API: https://api.crossref.org/documentation

Requests identify the caller with a contact address in the User-Agent so they
are routed to Crossref's polite pool.
"""

import logging
from typing import Any
from urllib.parse import quote

import requests

from .errors import MetadataFetchError
from .models import DoiMetadata

logger = logging.getLogger(__name__)

CROSSREF_BASE = "https://api.crossref.org"
CROSSREF_WORKS = f"{CROSSREF_BASE}/works"
CROSSREF_TIMEOUT_SECONDS = 10
PDF_CONTENT_TYPE = "application/pdf"


def _first(value: Any) -> Any:
    """First element of a multi-valued Crossref field, or the value itself."""
    if isinstance(value, list):
        return value[0] if value else None
    return value


def parse_work(message: dict[str, Any]) -> DoiMetadata:
    """Normalize a Crossref work record into DoiMetadata."""
    title = _first(message.get("title")) or ""

    authors: list[str] = []
    for author in message.get("author") or []:
        if isinstance(author, dict):
            given = author.get("given") or ""
            family = author.get("family") or ""
            authors.append(f"{given} {family}".strip())

    pdf_url = None
    links = message.get("link")
    if isinstance(links, list):
        for link in links:
            if isinstance(link, dict) and link.get("content-type") == PDF_CONTENT_TYPE:
                pdf_url = link.get("URL") or None
                break

    journal = _first(message.get("container-title")) or ""

    year = None
    published = message.get("published")
    if isinstance(published, dict):
        date_parts = published.get("date-parts")
        if isinstance(date_parts, list) and date_parts and isinstance(date_parts[0], list):
            parts = date_parts[0]
            if parts:
                try:
                    year = int(parts[0]) or None
                except (TypeError, ValueError):
                    year = None

    return DoiMetadata(
        title=str(title),
        pdf_url=pdf_url,
        authors=authors,
        journal=str(journal),
        year=year,
    )


class CrossrefClient:
    """Looks up works by DOI. Transport errors from requests propagate unchanged."""

    def __init__(
        self,
        email: str,
        session: requests.Session | None = None,
        base_url: str = CROSSREF_WORKS,
        timeout: float = CROSSREF_TIMEOUT_SECONDS,
    ):
        self.email = email
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def headers(self) -> dict[str, str]:
        return {
            "User-Agent": f"DOI Labeler (mailto:{self.email})",
            "Accept": "application/json",
        }

    def work_url(self, doi: str) -> str:
        return f"{self.base_url}/{quote(doi, safe='')}"

    def fetch_metadata(self, doi: str) -> DoiMetadata:
        """
        Fetch and normalize metadata for doi.

        Raises MetadataFetchError on a non-success status or a response without
        a work record; requests.RequestException (including Timeout) otherwise.
        """
        try:
            resp = self.session.get(self.work_url(doi), headers=self.headers, timeout=self.timeout)
            if not resp.ok:
                raise MetadataFetchError(
                    f"Crossref API returned {resp.status_code}: {resp.reason or ''}".strip(),
                    status_code=resp.status_code,
                )
            try:
                data = resp.json()
            except ValueError as e:
                raise MetadataFetchError(f"Crossref returned invalid JSON: {e}") from e

            message = data.get("message") if isinstance(data, dict) else None
            if not isinstance(message, dict) or not message:
                raise MetadataFetchError("No work data found in Crossref response")

            metadata = parse_work(message)
        except (MetadataFetchError, requests.RequestException) as e:
            logger.error("Error fetching Crossref metadata for %s: %s", doi, e)
            raise

        logger.info('Fetched metadata for DOI %s: "%s"', doi, metadata.title)
        return metadata
