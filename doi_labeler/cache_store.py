"""
Durable DOI cache: metadata and classifications keyed by lower-case DOI, plus
the running count of classification credits spent.

The whole store is one JSON document, rewritten after every mutation.
Deleting the file resets memoization and the credit counter.
"""

import json
import logging
import os
from typing import Any, Callable

from .doi_utils import normalize_doi
from .models import CacheEntry, CacheStats, Classification, DoiMetadata, utc_now_iso

logger = logging.getLogger(__name__)


class CacheStore:
    """
    In-memory cache state backed by a JSON file.

    Persistence failures are logged and never raised. ``save()`` reports them
    through its return value, ``last_save_error`` and ``on_save_error``.
    Not safe for concurrent use.
    """

    def __init__(
        self,
        path: str,
        credit_limit: int,
        on_save_error: Callable[[Exception], None] | None = None,
    ):
        self.path = path
        self.credit_limit = credit_limit
        self.on_save_error = on_save_error
        self.entries: dict[str, CacheEntry] = {}
        self.credits_used = 0
        self.last_updated = utc_now_iso()
        self.last_save_error: Exception | None = None

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, doi: str) -> bool:
        return normalize_doi(doi) in self.entries

    def load(self) -> None:
        """Read the store from disk, creating it if missing. Other failures leave state as is."""
        if not os.path.isfile(self.path):
            logger.info("No cache file found at %s, starting fresh", self.path)
            self.save()
            return
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            entries, credits_used, last_updated = self._parse(data)
        except (json.JSONDecodeError, OSError, AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error("Error loading cache from %s: %s", self.path, e)
            return

        self.entries = entries
        self.credits_used = credits_used
        self.last_updated = last_updated
        logger.info(
            "Cache loaded: %d entries, %d credits used", len(self.entries), self.credits_used
        )

    @staticmethod
    def _parse(data: Any) -> tuple[dict[str, CacheEntry], int, str]:
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        raw_entries = data.get("entries") or {}
        if not isinstance(raw_entries, dict):
            raise TypeError(f"entries must be a JSON object, got {type(raw_entries).__name__}")
        entries: dict[str, CacheEntry] = {}
        for key, raw in raw_entries.items():
            entry = CacheEntry.from_dict(raw)
            entries[normalize_doi(key)] = entry
        credits_used = int(data.get("creditsUsed", 0))
        if credits_used < 0:
            raise ValueError(f"creditsUsed must be non-negative, got {credits_used}")
        return entries, credits_used, str(data.get("lastUpdated") or utc_now_iso())

    def to_dict(self) -> dict[str, Any]:
        return {
            "entries": {doi: entry.to_dict() for doi, entry in self.entries.items()},
            "creditsUsed": self.credits_used,
            "lastUpdated": self.last_updated,
        }

    def save(self) -> bool:
        """Write the full store to disk. Returns False (and notifies) on failure."""
        self.last_updated = utc_now_iso()
        try:
            payload = json.dumps(self.to_dict(), indent=2)
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(payload)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error saving cache to %s: %s", self.path, e)
            self.last_save_error = e
            if self.on_save_error is not None:
                try:
                    self.on_save_error(e)
                except Exception as callback_error:
                    logger.error("on_save_error callback failed: %s", callback_error)
            return False
        self.last_save_error = None
        return True

    def get(self, doi: str) -> CacheEntry | None:
        return self.entries.get(normalize_doi(doi))

    def put_metadata(self, doi: str, metadata: DoiMetadata) -> CacheEntry:
        """Create the entry for doi with a fresh timestamp and persist."""
        key = normalize_doi(doi)
        entry = CacheEntry(doi=key, metadata=metadata)
        self.entries[key] = entry
        self.save()
        return entry

    def set_classification(self, doi: str, classification: Classification) -> CacheEntry:
        """Attach a classification to an existing entry and persist."""
        entry = self.get(doi)
        if entry is None:
            raise KeyError(f"No cached metadata for DOI {doi}; cannot store a classification")
        entry.classification = classification
        self.save()
        return entry

    def record_credit(self) -> int:
        """Count one spent classification credit and persist. Returns the new total."""
        self.credits_used += 1
        self.save()
        return self.credits_used

    def stats(self) -> CacheStats:
        return CacheStats(
            total_entries=len(self.entries),
            credits_used=self.credits_used,
            credit_limit=self.credit_limit,
        )
