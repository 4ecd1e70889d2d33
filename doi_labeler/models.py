"""
Records stored in the DOI cache file.

The on-disk JSON uses camelCase keys (``pdfUrl``, ``processedAt``,
``creditsUsed``); the dataclasses use snake_case and convert at the edges.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with a trailing Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _coerce_int(value: Any) -> int | None:
    """Coerce value to int if possible."""
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class DoiMetadata:
    """Bibliographic metadata for one DOI, as resolved from Crossref."""

    title: str = ""
    pdf_url: str | None = None
    authors: list[str] | None = None
    journal: str | None = None
    year: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"title": self.title}
        if self.pdf_url is not None:
            data["pdfUrl"] = self.pdf_url
        if self.authors is not None:
            data["authors"] = list(self.authors)
        if self.journal is not None:
            data["journal"] = self.journal
        if self.year is not None:
            data["year"] = self.year
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DoiMetadata":
        authors = data.get("authors")
        return cls(
            title=str(data.get("title") or ""),
            pdf_url=data.get("pdfUrl") or None,
            authors=[str(a) for a in authors] if isinstance(authors, list) else None,
            journal=data.get("journal"),
            year=_coerce_int(data.get("year")),
        )


@dataclass(frozen=True)
class Classification:
    """Label returned by the classification service. Confidence is not validated."""

    classification: str
    confidence: float | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"classification": self.classification}
        if self.confidence is not None:
            data["confidence"] = self.confidence
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Classification":
        return cls(
            classification=str(data["classification"]),
            confidence=data.get("confidence"),
        )


@dataclass
class CacheEntry:
    """One cached DOI. A classification is only ever added after metadata."""

    doi: str
    metadata: DoiMetadata
    classification: Classification | None = None
    processed_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"doi": self.doi, "metadata": self.metadata.to_dict()}
        if self.classification is not None:
            data["classification"] = self.classification.to_dict()
        data["processedAt"] = self.processed_at
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CacheEntry":
        if not isinstance(data, dict):
            raise TypeError(f"cache entry must be a JSON object, got {type(data).__name__}")
        if not isinstance(data.get("metadata"), dict):
            raise TypeError(f"metadata of {data.get('doi')} must be a JSON object")
        classification = data.get("classification")
        return cls(
            doi=str(data["doi"]),
            metadata=DoiMetadata.from_dict(data["metadata"]),
            classification=(
                Classification.from_dict(classification)
                if isinstance(classification, dict) and "classification" in classification
                else None
            ),
            processed_at=str(data.get("processedAt") or utc_now_iso()),
        )


@dataclass(frozen=True)
class CacheStats:
    total_entries: int
    credits_used: int
    credit_limit: int

    def to_dict(self) -> dict[str, int]:
        return {
            "totalEntries": self.total_entries,
            "creditsUsed": self.credits_used,
            "creditLimit": self.credit_limit,
        }
