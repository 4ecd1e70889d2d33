"""
Client for the KGX3 paper classification service.

Every successful call spends one credit from a fixed budget. The spend is
counted and persisted before classify() returns; a crash after the remote
call can therefore over-count a credit but never under-count one.
"""

import logging
from typing import Any

import requests

from .cache_store import CacheStore
from .errors import ClassificationFetchError, ConfigurationError, CreditLimitExceeded
from .models import Classification

logger = logging.getLogger(__name__)

CLASSIFIER_TIMEOUT_SECONDS = 30


class ClassificationClient:
    def __init__(
        self,
        store: CacheStore,
        api_url: str,
        api_key: str,
        email: str,
        session: requests.Session | None = None,
        timeout: float = CLASSIFIER_TIMEOUT_SECONDS,
    ):
        self.store = store
        self.api_url = api_url
        self.api_key = api_key
        self.email = email
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def credit_limit(self) -> int:
        """The budget lives on the store so stats() and enforcement agree."""
        return self.store.credit_limit

    @property
    def credits_remaining(self) -> int:
        return max(0, self.credit_limit - self.store.credits_used)

    def _check_ready(self) -> None:
        if self.store.credits_used >= self.credit_limit:
            raise CreditLimitExceeded(self.store.credits_used, self.credit_limit)
        if not self.api_key:
            raise ConfigurationError("KGX3_API_KEY not configured")
        if not self.api_url:
            raise ConfigurationError("KGX3_API_URL not configured")

    def classify(self, title: str, pdf_url: str | None = None) -> Classification:
        """
        Classify a paper by title and PDF link.

        The returned label is not checked against the known vocabulary.
        Raises CreditLimitExceeded or ConfigurationError before any network
        call, ClassificationFetchError on an error status or unusable body,
        and requests.RequestException on transport failure.
        """
        self._check_ready()

        payload = {"title": title, "pdf_url": pdf_url or "", "email": self.email}
        headers = {"Content-Type": "application/json", "X-API-Key": self.api_key}

        try:
            logger.info(
                'Classifying paper: "%s" (Credits used: %d/%d)',
                title,
                self.store.credits_used,
                self.credit_limit,
            )
            resp = self.session.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
            if not resp.ok:
                raise ClassificationFetchError(
                    f"KGX3 API returned {resp.status_code}: {resp.reason or ''}".strip(),
                    status_code=resp.status_code,
                )

            # The service accepted the call; charge it before looking at the body
            self.store.record_credit()
            result = self._parse(resp)
        except (ClassificationFetchError, requests.RequestException) as e:
            logger.error('Error classifying paper "%s": %s', title, e)
            raise

        logger.info(
            "Paper classified as: %s (Credits used: %d/%d)",
            result.classification,
            self.store.credits_used,
            self.credit_limit,
        )
        return result

    @staticmethod
    def _parse(resp: requests.Response) -> Classification:
        try:
            body: Any = resp.json()
        except ValueError as e:
            raise ClassificationFetchError(f"KGX3 API returned invalid JSON: {e}") from e
        if not isinstance(body, dict) or not isinstance(body.get("classification"), str):
            raise ClassificationFetchError("KGX3 response has no classification label")
        return Classification(
            classification=body["classification"],
            confidence=body.get("confidence"),
        )
