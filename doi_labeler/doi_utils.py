"""
Shared DOI helpers. Find DOIs in free text and normalize them so the same
work always maps to the same cache key.
"""

import re
from urllib.parse import unquote

# Resolver links win over bare DOIs appearing earlier in the text.
DOI_URL_PATTERN = re.compile(
    r"(?:https?://)?(?:dx\.)?doi\.org/?(10\.\d{4,9}/[-._;()/:A-Z0-9]+)",
    re.IGNORECASE,
)
BARE_DOI_PATTERN = re.compile(r"(10\.\d{4,9}/[-._;()/:A-Z0-9]+)", re.IGNORECASE)


def normalize_doi(doi: str | None) -> str:
    """
    Return a canonical DOI string: fully unquoted, stripped and lower-cased.
    Repeatedly unquotes until stable so multi-encoded values (e.g. %252F)
    become a single clean DOI.
    """
    if doi is None:
        return ""
    s = doi.strip()
    while True:
        t = unquote(s)
        if t == s:
            break
        s = t
    return s.strip().lower()


def extract_doi(text: str | None) -> str | None:
    """Return the first DOI found in text, lower-cased, or None."""
    if not text:
        return None
    for pattern in (DOI_URL_PATTERN, BARE_DOI_PATTERN):
        match = pattern.search(text)
        if match:
            return match.group(1).lower()
    return None
