"""
DOI processing pipeline: cache lookup, Crossref metadata, credit-limited
classification and badge mapping.

process() never raises. Every failure is logged and reported as "no badge" so
one bad DOI cannot abort a batch. process_detailed() returns the same badge
together with the reason it was (or was not) produced.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from .badges import map_to_badge
from .cache_config import build_crossref_session
from .cache_store import CacheStore
from .classifier import ClassificationClient
from .config import Config
from .crossref import CrossrefClient
from .doi_utils import extract_doi, normalize_doi

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    BADGE = "badge"
    UNMAPPED = "unmapped"  # classified, label has no badge
    NO_TITLE = "no_title"
    NO_PDF = "no_pdf"
    FAILED = "failed"
    NO_DOI = "no_doi"


@dataclass(frozen=True)
class ProcessResult:
    doi: str | None
    outcome: Outcome
    badge: str | None = None
    label: str | None = None
    error: Exception | None = None


class DoiPipeline:
    """Runs one DOI at a time against a shared CacheStore."""

    def __init__(
        self,
        store: CacheStore,
        metadata_client: CrossrefClient,
        classifier: ClassificationClient,
    ):
        self.store = store
        self.metadata_client = metadata_client
        self.classifier = classifier

    def process(self, doi: str) -> str | None:
        """Return the badge identifier for doi, or None."""
        return self.process_detailed(doi).badge

    def process_text(self, text: str) -> ProcessResult:
        """Extract the first DOI from text and process it."""
        doi = extract_doi(text)
        if doi is None:
            return ProcessResult(doi=None, outcome=Outcome.NO_DOI)
        return self.process_detailed(doi)

    def process_detailed(self, doi: str) -> ProcessResult:
        doi = normalize_doi(doi)
        try:
            return self._process(doi)
        except Exception as e:
            logger.error("Error processing DOI %s: %s", doi, e, extra={"doi": doi})
            return ProcessResult(doi=doi, outcome=Outcome.FAILED, error=e)

    def _labelled(self, doi: str, label: str) -> ProcessResult:
        badge = map_to_badge(label)
        if badge is None:
            logger.info("No badge for classification %r of DOI %s", label, doi)
            return ProcessResult(doi=doi, outcome=Outcome.UNMAPPED, label=label)
        return ProcessResult(doi=doi, outcome=Outcome.BADGE, badge=badge, label=label)

    def _process(self, doi: str) -> ProcessResult:
        entry = self.store.get(doi)
        if entry is not None and entry.classification is not None:
            label = entry.classification.classification
            logger.info("Using cached classification for DOI %s: %s", doi, label)
            return self._labelled(doi, label)

        if entry is not None:
            metadata = entry.metadata
        else:
            metadata = self.metadata_client.fetch_metadata(doi)
            self.store.put_metadata(doi, metadata)

        if not metadata.title:
            logger.warning("No title found for DOI %s, skipping classification", doi)
            return ProcessResult(doi=doi, outcome=Outcome.NO_TITLE)

        # Only spend a credit when the classifier can read the full text
        if not metadata.pdf_url:
            logger.warning(
                "No PDF URL found for DOI %s, skipping classification to conserve credits", doi
            )
            return ProcessResult(doi=doi, outcome=Outcome.NO_PDF)

        classification = self.classifier.classify(metadata.title, metadata.pdf_url)
        self.store.set_classification(doi, classification)
        return self._labelled(doi, classification.classification)


def build_pipeline(config: Config | None = None) -> DoiPipeline:
    """Wire a pipeline from config and load its cache from disk."""
    config = config or Config()
    store = CacheStore(config.cache_file, credit_limit=config.credit_limit)
    store.load()
    metadata_client = CrossrefClient(
        config.crossref_email, session=build_crossref_session(config.http_cache_dir)
    )
    classifier = ClassificationClient(
        store,
        api_url=config.classifier_api_url,
        api_key=config.classifier_api_key,
        email=config.crossref_email,
    )
    return DoiPipeline(store, metadata_client, classifier)
