"""Exceptions raised by the DOI labeling pipeline."""


class DoiLabelerError(Exception):
    """Base class for pipeline errors."""


class ConfigurationError(DoiLabelerError):
    """Required configuration (e.g. the classifier API key) is missing."""


class CreditLimitExceeded(DoiLabelerError):
    """The classification credit budget has been spent."""

    def __init__(self, credits_used: int, credit_limit: int):
        super().__init__(
            f"Credit limit of {credit_limit} reached ({credits_used} used). "
            "Cannot classify more papers."
        )
        self.credits_used = credits_used
        self.credit_limit = credit_limit


class FetchError(DoiLabelerError):
    """An upstream service answered with an error status or an unusable body."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MetadataFetchError(FetchError):
    """Crossref lookup failed."""


class ClassificationFetchError(FetchError):
    """Classification service call failed."""
