"""Unit tests for the DOI pipeline (with mocks)."""

from unittest.mock import Mock, patch

import pytest
import requests

from conftest import make_response
from doi_labeler.cache_store import CacheStore
from doi_labeler.classifier import ClassificationClient
from doi_labeler.config import Config
from doi_labeler.crossref import CrossrefClient
from doi_labeler.errors import MetadataFetchError
from doi_labeler.models import Classification, DoiMetadata
from doi_labeler.pipeline import DoiPipeline, Outcome, build_pipeline

DOI = "10.1038/nature12373"
WITH_PDF = DoiMetadata(title="Nanometre-scale thermometry", pdf_url="https://example.org/p.pdf")


def _pipeline(store, label="Model Drift", credit_limit=None, work=None):
    if credit_limit is not None:
        store.credit_limit = credit_limit
    crossref_session = Mock()
    crossref_session.get.return_value = make_response(body={"message": work or {}})
    classifier_session = Mock()
    classifier_session.post.return_value = make_response(
        body={"classification": label, "confidence": 0.9}
    )
    metadata_client = CrossrefClient("labels@example.org", session=crossref_session)
    classifier = ClassificationClient(
        store,
        api_url="https://classifier.example.org/classify",
        api_key="secret",
        email="labels@example.org",
        session=classifier_session,
    )
    return DoiPipeline(store, metadata_client, classifier), crossref_session, classifier_session


def test_full_run_fetches_classifies_and_caches(store, crossref_work):
    pipeline, crossref, classifier = _pipeline(store, work=crossref_work)

    assert pipeline.process(DOI) == "model-drift"

    crossref.get.assert_called_once()
    classifier.post.assert_called_once()
    entry = store.get(DOI)
    assert entry.metadata.title == "Nanometre-scale thermometry in a living cell"
    assert entry.classification == Classification("Model Drift", 0.9)
    assert store.credits_used == 1


def test_second_call_is_fully_memoized(store, crossref_work):
    pipeline, crossref, classifier = _pipeline(store, work=crossref_work)

    first = pipeline.process(DOI)
    second = pipeline.process(DOI)

    assert first == second == "model-drift"
    assert crossref.get.call_count == 1
    assert classifier.post.call_count == 1
    assert store.credits_used == 1


def test_cached_classification_makes_no_network_calls(store):
    store.put_metadata(DOI, WITH_PDF)
    store.set_classification(DOI, Classification("Normal Science"))
    pipeline = DoiPipeline(store, Mock(spec=CrossrefClient), Mock(spec=ClassificationClient))

    with patch("requests.Session.request") as request:
        assert pipeline.process(DOI) == "normal-science"
    request.assert_not_called()
    pipeline.metadata_client.fetch_metadata.assert_not_called()
    pipeline.classifier.classify.assert_not_called()


def test_cached_metadata_is_reused_for_classification(store):
    store.put_metadata(DOI, WITH_PDF)
    pipeline, crossref, classifier = _pipeline(store, label="Paradigm Shift")

    assert pipeline.process(DOI) == "paradigm-shift"
    crossref.get.assert_not_called()
    classifier.post.assert_called_once()


def test_no_pdf_never_spends_a_credit(store):
    pipeline, _, classifier = _pipeline(store, work={"title": ["Has a title"]})

    result = pipeline.process_detailed(DOI)

    assert result.badge is None
    assert result.outcome is Outcome.NO_PDF
    classifier.post.assert_not_called()
    assert store.credits_used == 0
    # Metadata is still cached so the registry is not asked again
    assert store.get(DOI).metadata.title == "Has a title"


def test_empty_title_skips_classification(store):
    work = {"title": [], "link": [{"content-type": "application/pdf", "URL": "https://x/p.pdf"}]}
    pipeline, _, classifier = _pipeline(store, work=work)

    result = pipeline.process_detailed(DOI)

    assert result.outcome is Outcome.NO_TITLE
    assert result.badge is None
    classifier.post.assert_not_called()


def test_budget_exhausted_returns_none_without_network(store):
    store.put_metadata(DOI, WITH_PDF)
    store.credits_used = 3
    pipeline, _, classifier = _pipeline(store, credit_limit=3)

    result = pipeline.process_detailed(DOI)

    assert result.badge is None
    assert result.outcome is Outcome.FAILED
    classifier.post.assert_not_called()
    assert store.credits_used == 3


def test_unmapped_label_is_cached_but_yields_no_badge(store):
    store.put_metadata(DOI, WITH_PDF)
    pipeline, _, _ = _pipeline(store, label="Something Else")

    result = pipeline.process_detailed(DOI)

    assert result.badge is None
    assert result.outcome is Outcome.UNMAPPED
    assert result.label == "Something Else"
    assert store.get(DOI).classification.classification == "Something Else"


def test_metadata_failure_is_absence(store, caplog):
    pipeline, crossref, _ = _pipeline(store)
    crossref.get.return_value = make_response(status_code=404, reason="Not Found")

    with caplog.at_level("ERROR", logger="doi_labeler.pipeline"):
        result = pipeline.process_detailed(DOI)

    assert result.badge is None
    assert result.outcome is Outcome.FAILED
    assert isinstance(result.error, MetadataFetchError)
    assert f"Error processing DOI {DOI}" in caplog.text
    assert store.get(DOI) is None


def test_transport_failure_is_absence(store):
    pipeline, crossref, _ = _pipeline(store)
    crossref.get.side_effect = requests.Timeout("timed out")

    assert pipeline.process(DOI) is None


def test_classification_failure_keeps_metadata(store):
    store.put_metadata(DOI, WITH_PDF)
    pipeline, _, classifier = _pipeline(store)
    classifier.post.return_value = make_response(status_code=500, reason="Server Error")

    assert pipeline.process(DOI) is None
    assert store.get(DOI).classification is None
    assert store.credits_used == 0


def test_doi_is_case_normalized(store, crossref_work):
    pipeline, crossref, _ = _pipeline(store, work=crossref_work)
    pipeline.process("10.1038/NATURE12373")
    assert pipeline.process(DOI) == "model-drift"
    assert crossref.get.call_count == 1


def test_process_text_extracts_first(store, crossref_work):
    pipeline, _, _ = _pipeline(store, work=crossref_work)
    result = pipeline.process_text("See https://doi.org/10.1038/nature12373 for details")
    assert result.doi == DOI
    assert result.outcome is Outcome.BADGE
    assert result.badge == "model-drift"


def test_process_text_without_doi(store):
    pipeline, crossref, _ = _pipeline(store)
    result = pipeline.process_text("nothing to see here")
    assert result.outcome is Outcome.NO_DOI
    assert result.doi is None
    crossref.get.assert_not_called()


def test_persistence_failure_does_not_stop_pipeline(tmp_path, crossref_work):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    errors = []
    store = CacheStore(str(blocker / "cache.json"), credit_limit=3, on_save_error=errors.append)
    pipeline, _, _ = _pipeline(store, work=crossref_work)

    assert pipeline.process(DOI) == "model-drift"
    assert store.credits_used == 1
    assert errors


def test_build_pipeline_loads_cache(cache_path):
    config = Config(
        crossref_email="labels@example.org",
        classifier_api_key="secret",
        classifier_api_url="https://classifier.example.org/classify",
        cache_file=cache_path,
        credit_limit=5,
        http_cache_dir="",
    )
    pipeline = build_pipeline(config)
    assert pipeline.store.stats().credit_limit == 5
    assert pipeline.classifier.credit_limit == 5
    assert pipeline.metadata_client.email == "labels@example.org"


@pytest.mark.integration
def test_build_pipeline_with_http_cache(tmp_path):
    config = Config(cache_file=str(tmp_path / "c.json"), http_cache_dir=str(tmp_path / "http"))
    pipeline = build_pipeline(config)
    assert pipeline.metadata_client.fetch_metadata(DOI).year == 2013
